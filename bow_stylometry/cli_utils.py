"""Console output helpers for the analysis runner."""

import platform

import pandas as pd


# ASCII stand-ins for the symbols the runner prints
_ASCII_REPLACEMENTS = {
    '✓': '[OK]',
    '✗': '[FAIL]',
    '⚠': '[WARNING]',
    '→': '->',
    '═': '=',
    '║': '|',
    '╔': '+',
    '╗': '+',
    '╚': '+',
    '╝': '+',
}


def is_windows():
    """Check if running on Windows."""
    return platform.system() == 'Windows'


def to_ascii(text):
    """Replace the runner's Unicode symbols with ASCII equivalents."""
    text = str(text)
    for symbol, ascii_text in _ASCII_REPLACEMENTS.items():
        text = text.replace(symbol, ascii_text)
    return ''.join(char if ord(char) < 128 else '?' for char in text)


def safe_print(*args, **kwargs):
    """
    Print that falls back to ASCII when the terminal cannot encode Unicode.
    """
    message = ' '.join(str(arg) for arg in args)
    try:
        print(message, **kwargs)
    except UnicodeEncodeError:
        print(to_ascii(message), **kwargs)


def format_header(title, width=60, char='═'):
    """Format a boxed header, plain ASCII on Windows."""
    if is_windows():
        top = '+' + '=' * (width - 2) + '+'
        middle = f"| {title:^{width - 4}} |"
        bottom = top
    else:
        top = "╔" + char * (width - 2) + "╗"
        middle = f"║ {title:^{width - 4}} ║"
        bottom = "╚" + char * (width - 2) + "╝"

    return f"\n{top}\n{middle}\n{bottom}\n"


def format_table(df: pd.DataFrame, max_rows=20, float_format='{:.4f}'.format):
    """Render the first rows of a DataFrame as an indented text table."""
    shown = df.head(max_rows)
    text = shown.to_string(index=False, float_format=float_format)
    if len(df) > max_rows:
        text += f"\n... ({len(df) - max_rows} more rows)"
    return '\n'.join('  ' + line for line in text.splitlines())
