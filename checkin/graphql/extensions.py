# checkin/graphql/extensions.py
from strawberry.extensions import SchemaExtension


class RequestVariables(SchemaExtension):
    """
    Keeps the operation variables exactly as the client sent them.

    Forwarded fields send these upstream. The values resolvers see have been
    coerced against this service's input types, which adds an explicit null
    for every input field the client left out.
    """

    def on_operation(self):
        self.execution_context.context.request_variables = dict(
            self.execution_context.variables or {}
        )
        yield
