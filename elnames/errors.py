
class ElnamesError(Exception):
    """ Base class for all elnames errors"""
    pass

class ElnamesSyntaxError(ElnamesError):
    """ Raised when source text cannot be read"""

class StaleContextError(ElnamesError):
    """ Raised when a rewrite starts while another one is still active"""

class UnknownOptionError(ElnamesError):
    """ Raised when a namespace option has no matching handler"""

class OptionValueError(ElnamesError):
    """ Raised when a namespace option is missing its value or has the wrong kind"""

class InvalidProtectionValueError(ElnamesError):
    """ Raised when the protection marker is not a printable name"""

class GrammarMismatch(ElnamesError):
    """ Raised by the grammar interpreter when a call does not fit its grammar"""

    def __init__(self, message: str, form=None):
        super().__init__(message)
        self.form = form


class ElnamesWarning(UserWarning):
    """ Base class for non-fatal rewrite diagnostics"""

class AmbiguousMacroShapeWarning(ElnamesWarning):
    """ A macro call could not be classified; it was left unmodified"""

class UnsupportedCompoundHeadWarning(ElnamesWarning):
    """ A list head that is not a lambda literal; children rewritten independently"""
