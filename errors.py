class RegexError(ValueError):
    """Base class for every pattern compilation failure."""

    def __init__(self, msg, position=None):
        super().__init__(msg)
        self.msg = msg
        self.position = position

    def __str__(self):
        if self.position is None:
            return self.msg
        return f"{self.msg} (at position {self.position})"


class UnterminatedEscape(RegexError):
    pass


class UnmatchedParenthesis(RegexError):
    pass


class InvalidExpressionStart(RegexError):
    pass


class InvalidExpressionEnd(RegexError):
    pass


class MalformedPostfix(RegexError):
    pass


class PatternTooLong(RegexError):
    pass
