"""Program input argument parsing.

Program arguments are given as whitespace separated felts, with array
arguments wrapped in brackets, e.g. "1 2 [1 2 3]". Arrays do not nest.
"""

from calldata.errors import ParseError
from calldata.values import Value
from primitives.field import parse_felt


def _tokenize(text: str) -> list[str]:
    """Split into felts and bracket delimiters, keeping the delimiters."""
    tokens = []
    for word in text.split():
        if word.startswith("["):
            tokens.append("[")
            word = word[1:]
        if word.endswith("]"):
            if word[:-1]:
                tokens.append(word[:-1])
            tokens.append("]")
        elif word:
            tokens.append(word)
    return tokens


def _felt(token: str) -> int:
    try:
        return parse_felt(token)
    except ValueError as e:
        raise ParseError(f"{token!r} is not a valid felt", token) from e


def parse_program_input(text: str) -> list[Value]:
    """Parse program arguments into scalars and arrays of felts.

    An unterminated array runs to the end of the input.

    Raises:
        ParseError: If a token is not a valid felt or a bracket is misplaced.
    """
    args: list[Value] = []
    tokens = iter(_tokenize(text))
    for token in tokens:
        if token == "[":
            array: list[Value] = []
            for item in tokens:
                if item == "]":
                    break
                if item == "[":
                    raise ParseError("nested arrays are not supported", text)
                array.append(_felt(item))
            args.append(array)
        elif token == "]":
            raise ParseError("unmatched closing bracket", text)
        else:
            args.append(_felt(token))
    return args
