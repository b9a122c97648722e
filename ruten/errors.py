from typing import Any


ERROR_LABELS = {
    'SyntaxError': 'syntax error',
    'RuntimeError': 'runtime error',
    'TypeError': 'type error',
    'NameError': 'name error',
    'ImportError': 'import error',
}


class RutenError(Exception):
    """Exception type used to propagate Ruten errors to the driver."""
    def __init__(self, kind: str, message: str):
        if kind not in ERROR_LABELS:
            raise ValueError(f'unknown error kind {kind}')
        super().__init__(f"{ERROR_LABELS[kind]}: {message}")
        self.kind = kind
        self.message = message


class ReturnSignal:
    """Result of executing a return statement; carries the returned value."""
    def __init__(self, value: Any):
        self.value = value

    def __repr__(self) -> str:
        return f"ReturnSignal({self.value!r})"


class BreakSignal:
    def __repr__(self) -> str:
        return 'BREAK'


class ContinueSignal:
    def __repr__(self) -> str:
        return 'CONTINUE'


BREAK = BreakSignal()
CONTINUE = ContinueSignal()
