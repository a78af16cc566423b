"""
Dean Edwards' p,a,c,k,e,d JavaScript unpacker.

Embed hosts wrap their player config in
  eval(function(p,a,c,k,e,d){...}('payload',radix,count,'sym|tab'.split('|')))
Unpacking restores plain JS so stream URLs can be regexed out.
"""
from __future__ import annotations
import re

_PACKED_RE = re.compile(
    r"eval\(function\(p,a,c,k,e,[dr]\)\{.*?\}\('(?P<payload>.*?)',\s*(?P<radix>\d+),\s*"
    r"(?P<count>\d+),\s*'(?P<symtab>.*?)'\.split\('\|'\)",
    re.DOTALL,
)
_WORD_RE = re.compile(r"\b\w+\b")
_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"


def detect(text: str) -> bool:
    return _PACKED_RE.search(text) is not None


def _word_index(word: str, radix: int) -> int:
    if radix <= 36:
        return int(word, radix)
    index = 0
    for ch in word:
        digit = _DIGITS.find(ch)
        if digit < 0 or digit >= radix:
            raise ValueError(word)
        index = index * radix + digit
    return index


def unpack(text: str) -> str:
    """Unpacked source of the first packed block, or ``text`` unchanged."""
    match = _PACKED_RE.search(text)
    if match is None:
        return text
    radix = int(match.group("radix"))
    count = int(match.group("count"))
    symtab = match.group("symtab").split("|")
    symtab += [""] * (count - len(symtab))

    def lookup(m: re.Match) -> str:
        word = m.group(0)
        try:
            index = _word_index(word, radix)
        except ValueError:
            return word
        if index < len(symtab) and symtab[index]:
            return symtab[index]
        return word

    payload = match.group("payload").replace("\\'", "'")
    return _WORD_RE.sub(lookup, payload)
