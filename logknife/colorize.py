"""
Colors, word highlighting, JSON-ish colorizing, terminal string building
"""

import logging
from typing import List, Tuple

from .commands import Color, Highlight

log = logging.getLogger()


def build_colors():
    """generate list of Color objects for terminal"""
    cli = {  # shortcuts for config files
        'green': 'g',
        'red': 'r',
        'blue': 'b',
        'yellow': 'y',
    }
    dark_colors = ['black', 'darkred', 'darkgreen', 'brown', 'darkblue',
                   'purple', 'teal', 'lightgray']
    light_colors = ['darkgray', 'red', 'green', 'yellow', 'blue',
                    'fuchsia', 'turquoise', 'white']

    esc = '\x1b['

    codes = {
        'reset': esc + '39;49;00m',

        'bold': esc + '01m',
        'faint': esc + '02m',
        'standout': esc + '03m',
        'underline': esc + '04m',
    }

    for x, (d, l) in enumerate(zip(dark_colors, light_colors), 30):
        codes[d] = esc + '%im' % x
        codes[l] = esc + '%i;01m' % x

    # aliases
    codes['darkyellow'] = codes['brown']
    codes['white'] = codes['bold']
    codes['magenta'] = codes['purple']
    codes['cyan'] = codes['teal']

    return {name: Color(name, code, cli.get(name))
            for name, code in codes.items()}


color_lookup = build_colors()
Plain = Color('plain', '', 'e')
Reset = color_lookup['reset']
Red = color_lookup['red']
Blue = color_lookup['blue']
Yellow = color_lookup['yellow']
Green = color_lookup['green']
Cyan = color_lookup['cyan']
Magenta = color_lookup['magenta']
KeyEmphasis = Color('keyemphasis',
                    Yellow.escape + color_lookup['underline'].escape, None)

Tokens = List[Tuple[Color, str]]


def lookup_color(color):
    """Color for a name, or the Color itself"""
    if color is None or isinstance(color, Color):
        return color
    try:
        return color_lookup[color]
    except KeyError:
        raise ValueError('Unknown color %r' % color) from None


def word_color(highlight: Highlight) -> Color:
    """configured color, else red for errors, yellow for warnings, cyan"""
    color = lookup_color(highlight.color)
    if color is not None:
        return color
    word = highlight.word.upper()
    if word == 'ERROR':
        return Red
    if word in ('WARN', 'WARNING'):
        return Yellow
    return Cyan


def highlight_tokens(highlights, line) -> Tokens:
    """
    Split line into tokens around exact word matches.
    At each step the earliest occurrence of any word wins, ties go to the
    word configured first, and scanning resumes after the matched word.
    """
    tokens = []  # type: Tokens
    pos = 0
    while pos < len(line):
        best, best_pos = None, -1
        for highlight in highlights:
            found = line.find(highlight.word, pos)
            if found >= 0 and (best is None or found < best_pos):
                best, best_pos = highlight, found
        if best is None:
            tokens.append((Plain, line[pos:]))
            break
        if best_pos > pos:
            tokens.append((Plain, line[pos:best_pos]))
        tokens.append((word_color(best), best.word))
        pos = best_pos + len(best.word)
    return tokens


_literals = ('true', 'false', 'null')
_number_chars = frozenset('0123456789+-.eE')


def _word_char(ch):
    return ch.isalnum() or ch == '_'


def _string_end(line, start):
    """index after the closing quote of the string starting at start"""
    i = start + 1
    while i < len(line):
        if line[i] == '\\':
            i += 2
        elif line[i] == '"':
            return i + 1
        else:
            i += 1
    return len(line)


def json_tokens(line, keys=()) -> Tokens:
    """
    Lexical JSON colorizer, no parsing is done.
    Keys are blue (keys in keys are emphasized), strings green, numbers
    cyan, true/false/null magenta.
    """
    keys = set(keys)
    tokens = []  # type: Tokens

    def add(color, text):
        if tokens and color is Plain and tokens[-1][0] is Plain:
            tokens[-1] = (Plain, tokens[-1][1] + text)
        else:
            tokens.append((color, text))

    i = 0
    while i < len(line):
        ch = line[i]
        prev_word = i > 0 and _word_char(line[i - 1])
        if ch == '"':
            end = _string_end(line, i)
            rest = line[end:].lstrip()
            if rest.startswith(':'):
                name = line[i + 1:end - 1]
                add(KeyEmphasis if name in keys else Blue, line[i:end])
            else:
                add(Green, line[i:end])
            i = end
        elif not prev_word and (ch.isdigit() or ch == '-' and
                                line[i + 1:i + 2].isdigit()):
            end = i + 1
            while end < len(line) and line[end] in _number_chars:
                end += 1
            add(Cyan, line[i:end])
            i = end
        elif not prev_word and line.startswith(_literals, i):
            word = next(w for w in _literals if line.startswith(w, i))
            end = i + len(word)
            if end < len(line) and _word_char(line[end]):
                add(Plain, line[i:end])
            else:
                add(Magenta, word)
            i = end
        else:
            add(Plain, ch)
            i += 1
    return tokens


def tokens_to_str(color_line: Tokens, use_color=True):
    """turn color_line into a color string"""
    if not use_color:
        return ''.join(tk[1] for tk in color_line)

    def text(tk):
        color, value = tk
        if not color.escape:
            return value
        return color.escape + value + Reset.escape

    return ''.join(text(c) for c in color_line)


def render(line, highlights=(), json_keys=(), json=False, use_color=True):
    """colorize a raw admitted line"""
    if json or json_keys:
        tokens = json_tokens(line, [k.key if hasattr(k, 'key') else k
                                    for k in json_keys])
    elif highlights:
        tokens = highlight_tokens(highlights, line)
    else:
        return line
    return tokens_to_str(tokens, use_color)
