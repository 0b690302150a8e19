"""
Command Parser Module

Splits a command line into an argument vector and a redirection request.

Version: 1.0.0
"""

from dataclasses import dataclass, field
from enum import Enum, Flag
from typing import Iterator, List, Optional

from simpsh.core.config_loader import MAX_REDIRECTIONS, TOKEN_CAPACITY
from simpsh.exceptions import RedirectionError, TokenizeError, TokenLimitError


WHITESPACE = ('\t', '\n')


class TokenType(Enum):
    """Token types for command parsing."""
    WORD = "word"
    REDIRECT_IN = "redirect_in"
    REDIRECT_OUT = "redirect_out"


@dataclass
class Token:
    """A parsed token."""
    type: TokenType
    value: str


class Redirection(Flag):
    """Which standard streams a command redirects."""
    NONE = 0
    INPUT = 1
    OUTPUT = 2
    BOTH = INPUT | OUTPUT


@dataclass
class ParsedCommand:
    """
    A parsed command line.

    argv is empty for a blank line; command is then None.
    """
    argv: List[str] = field(default_factory=list)
    redirection: Redirection = Redirection.NONE
    input_file: Optional[str] = None
    output_file: Optional[str] = None

    @property
    def command(self) -> Optional[str]:
        return self.argv[0] if self.argv else None

    @property
    def args(self) -> List[str]:
        return self.argv[1:]

    @property
    def is_empty(self) -> bool:
        return not self.argv or not self.argv[0]


class CommandParser:
    """
    Parses shell command lines.

    Handles:
    - Words separated by spaces, tabs and newlines
    - Input (<) and output (>) redirection, at most two per line

    A redirection symbol ends the current word and is never part of it,
    so "cmd<in.txt" and "cmd < in.txt" parse the same way. Redirection
    filenames are the words immediately following the command name, in
    the order the symbols were typed.

    Example:
        >>> parser = CommandParser()
        >>> cmd = parser.parse("sort < in.txt > out.txt")
        >>> cmd.argv, cmd.input_file, cmd.output_file
        (['sort'], 'in.txt', 'out.txt')
    """

    def __init__(
        self,
        token_capacity: int = TOKEN_CAPACITY,
        max_redirections: int = MAX_REDIRECTIONS,
        delim: str = ' '
    ):
        self._token_capacity = token_capacity
        self._max_redirections = max_redirections
        self._delim = delim

    @property
    def max_tokens(self) -> int:
        """Largest argument count; one slot is kept for the terminator."""
        return self._token_capacity - 1

    def parse(self, line: str) -> ParsedCommand:
        """
        Parse a command line.

        Args:
            line: Command line string

        Returns:
            ParsedCommand (empty argv for a blank line)

        Raises:
            TokenizeError: More redirection symbols than allowed
            TokenLimitError: More words than the token vector holds
            RedirectionError: A redirection without a filename, or the
                same redirection twice
        """
        tokens = self._tokenize(line)
        return self._parse_tokens(tokens)

    @staticmethod
    def split_words(text: str, delim: str = ' ') -> List[str]:
        """
        Split text on delim, tabs and newlines, dropping empty words.

        Redirection symbols are ordinary characters here. Used to split
        the colon-separated search path.
        """
        return [
            token.value
            for token in CommandParser._scan(text, delim, redirections=False)
        ]

    def _tokenize(self, line: str) -> List[Token]:
        """Convert a line into tokens, enforcing the redirection limit."""
        tokens = []
        redirect_count = 0

        for token in self._scan(line, self._delim, redirections=True):
            if token.type != TokenType.WORD:
                redirect_count += 1
                if redirect_count > self._max_redirections:
                    raise TokenizeError(
                        f"too many redirections (at most {self._max_redirections})",
                        line=line
                    )
            tokens.append(token)

        return tokens

    @staticmethod
    def _scan(text: str, delim: str, redirections: bool) -> Iterator[Token]:
        """Yield words and, when enabled, redirection symbols."""
        current = ""

        for char in text:
            if char == delim or char in WHITESPACE:
                if current:
                    yield Token(TokenType.WORD, current)
                    current = ""
                continue

            if redirections and char in ('<', '>'):
                if current:
                    yield Token(TokenType.WORD, current)
                    current = ""
                if char == '<':
                    yield Token(TokenType.REDIRECT_IN, char)
                else:
                    yield Token(TokenType.REDIRECT_OUT, char)
                continue

            current += char

        # Don't forget last token
        if current:
            yield Token(TokenType.WORD, current)

    def _parse_tokens(self, tokens: List[Token]) -> ParsedCommand:
        """Build the argument vector and pull out the redirection slots."""
        words = [t.value for t in tokens if t.type == TokenType.WORD]
        symbols = [t.type for t in tokens if t.type != TokenType.WORD]

        if len(words) > self.max_tokens:
            raise TokenLimitError(len(words), self.max_tokens)

        if not symbols:
            return ParsedCommand(argv=words)

        if len(symbols) != len(set(symbols)):
            raise RedirectionError("ambiguous redirection")

        # Slots right after the command name hold the filenames.
        slots = len(symbols)
        if len(words) < 1 + slots:
            raise RedirectionError("missing redirection target")

        files = words[1:1 + slots]
        cmd = ParsedCommand(argv=[words[0]] + words[1 + slots:])

        for symbol, path in zip(symbols, files):
            if symbol == TokenType.REDIRECT_IN:
                cmd.redirection |= Redirection.INPUT
                cmd.input_file = path
            else:
                cmd.redirection |= Redirection.OUTPUT
                cmd.output_file = path

        return cmd
