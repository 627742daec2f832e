from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

FACES = "UDLRFB"
_MODIFIER_TURNS = {"": 1, "2": 2, "'": 3}
_TURNS_MODIFIER = {1: "", 2: "2", 3: "'"}
_SCRAMBLE_TOKEN = re.compile(r"\S+")


class ScrambleSyntaxError(ValueError):
    def __init__(self, message: str, token: str, position: int) -> None:
        super().__init__(f"{message} at index {position}")
        self.token = token
        self.position = position


@dataclass(frozen=True)
class Move:
    face: str
    modifier: str = ""

    def __post_init__(self) -> None:
        if self.face not in FACES or len(self.face) != 1:
            raise ValueError(f"Unsupported face: {self.face!r}")
        if self.modifier not in _MODIFIER_TURNS:
            raise ValueError(f"Unsupported move modifier: {self.modifier!r}")

    @classmethod
    def parse(cls, token: str, position: int = 0) -> Move:
        if len(token) in (1, 2) and token[0] in FACES and token[1:] in _MODIFIER_TURNS:
            return cls(face=token[0], modifier=token[1:])
        raise ScrambleSyntaxError(f"Unknown move token '{token}'", token, position)

    @classmethod
    def from_turns(cls, face: str, turns: int) -> Move:
        turns %= 4
        if turns == 0:
            raise ValueError("A move needs a non-zero number of quarter turns")
        return cls(face=face, modifier=_TURNS_MODIFIER[turns])

    @property
    def quarter_turns(self) -> int:
        return _MODIFIER_TURNS[self.modifier]

    def inverse(self) -> Move:
        return Move.from_turns(self.face, -self.quarter_turns)

    def __str__(self) -> str:
        return f"{self.face}{self.modifier}"


def parse_scramble(text: str) -> list[Move]:
    """Parses whitespace separated face turns (``R``, ``U'``, ``F2``) in order.

    Moves are never merged or reordered; blank input gives an empty list.
    """
    return [Move.parse(match.group(), match.start()) for match in _SCRAMBLE_TOKEN.finditer(text)]


def format_moves(moves: Iterable[Move]) -> str:
    return " ".join(str(move) for move in moves)


def invert_moves(moves: Iterable[Move]) -> list[Move]:
    return [move.inverse() for move in reversed(list(moves))]


def simplify_moves(moves: Iterable[Move]) -> list[Move]:
    """Merges adjacent turns of the same face; ``R R'`` vanishes, ``U U`` becomes ``U2``."""
    stack: list[tuple[str, int]] = []
    for move in moves:
        if stack and stack[-1][0] == move.face:
            face, turns = stack.pop()
            turns = (turns + move.quarter_turns) % 4
            if turns:
                stack.append((face, turns))
            continue
        stack.append((move.face, move.quarter_turns))
    return [Move.from_turns(face, turns) for face, turns in stack]


@dataclass(frozen=True)
class _Token:
    kind: str
    value: str
    start: int


class NotationExpander:
    """Expands algorithm notation: groups with repeats, commutators and conjugates.

    ``[A, B]`` is ``A B A' B'``, ``[A: B]`` is ``A B A'``, ``(A)3`` and ``A^3``
    repeat. Only the six outer faces are accepted.
    """

    _PUNCTUATION = {
        "(": "LPAREN",
        ")": "RPAREN",
        "[": "LBRACKET",
        "]": "RBRACKET",
        ",": "COMMA",
        ":": "COLON",
        "^": "CARET",
    }

    @classmethod
    def expand(cls, notation: str) -> list[Move]:
        tokens = cls._tokenize(notation)
        parser = _NotationParser(tokens=tokens, notation=notation)
        moves = parser.parse_sequence(stop_kinds=())

        if parser.has_more():
            token = parser.peek()
            raise ScrambleSyntaxError(f"Unexpected token '{token.value}'", token.value, token.start)
        return moves

    @classmethod
    def _tokenize(cls, notation: str) -> list[_Token]:
        tokens: list[_Token] = []
        i = 0
        length = len(notation)

        while i < length:
            char = notation[i]

            if char.isspace():
                i += 1
                continue

            if char in cls._PUNCTUATION:
                tokens.append(_Token(kind=cls._PUNCTUATION[char], value=char, start=i))
                i += 1
                continue

            if char.isdigit():
                start = i
                while i < length and notation[i].isdigit():
                    i += 1
                tokens.append(_Token(kind="INT", value=notation[start:i], start=start))
                continue

            if char.isalpha():
                start = i
                i += 1
                if i < length and notation[i] in "'2":
                    i += 1
                tokens.append(_Token(kind="MOVE", value=notation[start:i], start=start))
                continue

            raise ScrambleSyntaxError(f"Unsupported character '{char}'", char, i)

        return tokens


def expand_notation(notation: str) -> list[Move]:
    return NotationExpander.expand(notation)


@dataclass
class _NotationParser:
    tokens: list[_Token]
    notation: str
    index: int = 0

    def has_more(self) -> bool:
        return self.index < len(self.tokens)

    def peek(self) -> _Token:
        return self.tokens[self.index]

    def consume(self) -> _Token:
        token = self.tokens[self.index]
        self.index += 1
        return token

    def parse_sequence(self, stop_kinds: tuple[str, ...]) -> list[Move]:
        moves: list[Move] = []

        while self.has_more():
            token = self.peek()
            if token.kind in stop_kinds:
                break
            if token.kind in ("RPAREN", "RBRACKET", "COMMA", "COLON"):
                raise ScrambleSyntaxError(f"Unexpected '{token.value}'", token.value, token.start)

            atom, is_group = self.parse_atom()
            repeat = self.parse_repeat(is_group=is_group)
            for _ in range(repeat):
                moves.extend(atom)

        return moves

    def expect(self, kind: str, label: str) -> _Token:
        if not self.has_more() or self.peek().kind != kind:
            position = self.peek().start if self.has_more() else len(self.notation)
            raise ScrambleSyntaxError(f"Missing closing '{label}'", label, position)
        return self.consume()

    def parse_atom(self) -> tuple[list[Move], bool]:
        token = self.consume()

        if token.kind == "LPAREN":
            inner = self.parse_sequence(stop_kinds=("RPAREN",))
            self.expect("RPAREN", ")")
            return inner, True

        if token.kind == "LBRACKET":
            return self.parse_bracket(token), True

        if token.kind == "MOVE":
            return [Move.parse(token.value, token.start)], False

        raise ScrambleSyntaxError(f"Expected move, '(' or '[' but got '{token.value}'", token.value, token.start)

    def parse_bracket(self, opening: _Token) -> list[Move]:
        first = self.parse_sequence(stop_kinds=("COMMA", "COLON", "RBRACKET"))
        if not self.has_more():
            raise ScrambleSyntaxError("Missing closing ']'", "]", len(self.notation))

        separator = self.consume()
        if separator.kind == "RBRACKET":
            # A bare [A] behaves like a group.
            return first
        if not first:
            raise ScrambleSyntaxError(f"Empty sequence before '{separator.value}'", separator.value, separator.start)

        second = self.parse_sequence(stop_kinds=("RBRACKET",))
        self.expect("RBRACKET", "]")

        if separator.kind == "COMMA":
            return [*first, *second, *invert_moves(first), *invert_moves(second)]
        return [*first, *second, *invert_moves(first)]

    def parse_repeat(self, is_group: bool) -> int:
        if not self.has_more():
            return 1

        token = self.peek()

        if token.kind == "CARET":
            self.consume()
            if not self.has_more() or self.peek().kind != "INT":
                raise ScrambleSyntaxError("Expected integer after '^'", token.value, token.start)
            int_token = self.consume()
            repeat = int(int_token.value)
            if repeat < 1:
                raise ScrambleSyntaxError("Repeat must be >= 1", int_token.value, int_token.start)
            return repeat

        if is_group and token.kind == "INT":
            int_token = self.consume()
            repeat = int(int_token.value)
            if repeat < 1:
                raise ScrambleSyntaxError("Repeat must be >= 1", int_token.value, int_token.start)
            return repeat

        return 1
