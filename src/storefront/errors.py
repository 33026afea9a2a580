"""Error families raised by the storefront domain.

Protean's ``ValidationError`` and ``ObjectNotFoundError`` cover malformed
input and missing aggregates. The two classes here complete the picture:

* ``ConflictError`` — a uniqueness rule was broken (duplicate coupon code,
  second payment for an order, second order for a cart). Carries a machine
  readable ``code``.
* ``DomainError`` — a business rule or state-machine violation. Carries only
  a human readable message.
"""


class ConflictError(Exception):
    code = "CONFLICT"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class DomainError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
