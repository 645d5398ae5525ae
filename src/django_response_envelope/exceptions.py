class EnvelopeError(TypeError):
    """Raised when a payload cannot be turned into a mapping or a sequence."""
