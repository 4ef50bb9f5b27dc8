"""
Domain layer - quotation business rules without infrastructure dependencies.

This package contains the quotation request and line item models, the
customer resolution modes and the value objects they are built from.
Nothing here touches the database or HTTP.
"""
