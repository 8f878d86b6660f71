class InvalidInput(ValueError):
    """A request carried a missing or malformed field.

    Raised before any record is touched, so rejecting the request leaves
    the party unchanged. Unknown player ids are not errors: the registry
    treats them as silent no-ops.
    """
