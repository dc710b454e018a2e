"""LaTeX math to Unicode conversion for monospace display.

Three pure functions are used by the extractors:

- :func:`contains_latex`  -- does *text* contain math delimiters?
- :func:`process_text`    -- convert every delimited expression in *text*
- :func:`to_unicode`      -- convert one bare (or delimited) expression
"""

from __future__ import annotations

import re

# ---------------------------------------------------------------------------
# Symbol tables
# ---------------------------------------------------------------------------

_GREEK: dict[str, str] = {
    r"\alpha": "α", r"\beta": "β", r"\gamma": "γ", r"\delta": "δ",
    r"\epsilon": "ε", r"\varepsilon": "ε", r"\zeta": "ζ", r"\eta": "η",
    r"\theta": "θ", r"\vartheta": "ϑ", r"\iota": "ι", r"\kappa": "κ",
    r"\lambda": "λ", r"\mu": "μ", r"\nu": "ν", r"\xi": "ξ",
    r"\pi": "π", r"\varpi": "ϖ", r"\rho": "ρ", r"\varrho": "ϱ",
    r"\sigma": "σ", r"\varsigma": "ς", r"\tau": "τ", r"\upsilon": "υ",
    r"\phi": "φ", r"\varphi": "ϕ", r"\chi": "χ", r"\psi": "ψ", r"\omega": "ω",
    r"\Gamma": "Γ", r"\Delta": "Δ", r"\Theta": "Θ", r"\Lambda": "Λ",
    r"\Xi": "Ξ", r"\Pi": "Π", r"\Sigma": "Σ", r"\Upsilon": "Υ",
    r"\Phi": "Φ", r"\Psi": "Ψ", r"\Omega": "Ω",
}

_SYMBOLS: dict[str, str] = {
    # Operators
    r"\cdot": "·", r"\times": "×", r"\div": "÷", r"\pm": "±", r"\mp": "∓",
    r"\ast": "∗", r"\star": "⋆", r"\circ": "∘", r"\bullet": "•",
    # Relations
    r"\leq": "≤", r"\le": "≤", r"\geq": "≥", r"\ge": "≥",
    r"\neq": "≠", r"\ne": "≠", r"\approx": "≈", r"\equiv": "≡",
    r"\sim": "∼", r"\simeq": "≃", r"\cong": "≅", r"\propto": "∝",
    r"\ll": "≪", r"\gg": "≫", r"\prec": "≺", r"\succ": "≻",
    # Arrows
    r"\rightarrow": "→", r"\to": "→", r"\leftarrow": "←", r"\gets": "←",
    r"\leftrightarrow": "↔", r"\Rightarrow": "⇒", r"\Leftarrow": "⇐",
    r"\Leftrightarrow": "⇔", r"\mapsto": "↦", r"\uparrow": "↑", r"\downarrow": "↓",
    r"\nearrow": "↗", r"\searrow": "↘", r"\swarrow": "↙", r"\nwarrow": "↖",
    r"\implies": "⟹", r"\impliedby": "⟸", r"\iff": "⟺",
    r"\longrightarrow": "⟶", r"\longleftarrow": "⟵", r"\longmapsto": "⟼",
    r"\Downarrow": "⇓", r"\Uparrow": "⇑", r"\updownarrow": "↕", r"\Updownarrow": "⇕",
    # Sets
    r"\in": "∈", r"\notin": "∉", r"\ni": "∋", r"\subset": "⊂", r"\supset": "⊃",
    r"\subseteq": "⊆", r"\supseteq": "⊇", r"\cup": "∪", r"\cap": "∩",
    r"\emptyset": "∅", r"\varnothing": "∅",
    # Logic
    r"\land": "∧", r"\wedge": "∧", r"\lor": "∨", r"\vee": "∨",
    r"\neg": "¬", r"\lnot": "¬", r"\forall": "∀", r"\exists": "∃",
    r"\nexists": "∄", r"\therefore": "∴", r"\because": "∵",
    # Calculus
    r"\infty": "∞", r"\partial": "∂", r"\nabla": "∇",
    r"\sum": "∑", r"\prod": "∏", r"\coprod": "∐",
    r"\int": "∫", r"\iint": "∬", r"\iiint": "∭", r"\oint": "∮",
    # Misc
    r"\sqrt": "√", r"\surd": "√", r"\prime": "′", r"\degree": "°",
    r"\angle": "∠", r"\triangle": "△", r"\square": "□", r"\diamond": "◇",
    r"\aleph": "ℵ", r"\hbar": "ℏ", r"\ell": "ℓ", r"\wp": "℘",
    r"\Re": "ℜ", r"\Im": "ℑ", r"\complement": "∁",
    r"\ldots": "…", r"\cdots": "⋯", r"\vdots": "⋮", r"\ddots": "⋱",
    r"\langle": "⟨", r"\rangle": "⟩", r"\lceil": "⌈", r"\rceil": "⌉",
    r"\lfloor": "⌊", r"\rfloor": "⌋", r"\lvert": "|", r"\rvert": "|",
    r"\|": "‖", r"\lVert": "‖", r"\rVert": "‖",
}

_SPACING: dict[str, str] = {
    r"\,": " ", r"\:": " ", r"\;": " ", "\\ ": " ",
    r"\quad": "  ", r"\qquad": "    ",
}

# Longest first so \le never eats the front of \leq
_COMMANDS: tuple[tuple[str, str], ...] = tuple(
    sorted(
        {**_GREEK, **_SYMBOLS, **_SPACING}.items(),
        key=lambda kv: len(kv[0]),
        reverse=True,
    ),
)

_TEXT_COMMANDS: tuple[str, ...] = (
    r"\mathrm", r"\text", r"\textrm", r"\textit", r"\textbf",
    r"\mathit", r"\mathbf", r"\mathsf", r"\mathtt", r"\mathcal",
    r"\operatorname", r"\mod", r"\bmod", r"\pmod", r"\mathbb",
)

# \left / \right size modifiers, replaced before \le can corrupt them
_DELIMITER_SIZING: tuple[tuple[str, str], ...] = (
    (r"\left(", "("), (r"\right)", ")"),
    (r"\left[", "["), (r"\right]", "]"),
    (r"\left\{", "{"), (r"\right\}", "}"),
    (r"\left{", "{"), (r"\right}", "}"),
    (r"\left|", "|"), (r"\right|", "|"),
    (r"\left.", ""), (r"\right.", ""),
    (r"\left\langle", "⟨"), (r"\right\rangle", "⟩"),
)

_ESCAPES: tuple[tuple[str, str], ...] = (
    (r"\{", "{"), (r"\}", "}"), (r"\%", "%"),
    (r"\$", "$"), (r"\&", "&"), (r"\_", "_"),
)

_SUPERSCRIPTS = str.maketrans(
    "0123456789+-=()abcdefghijklmnoprstuvwxyzABDEGHIJKLMNOPRTUVW",
    "⁰¹²³⁴⁵⁶⁷⁸⁹⁺⁻⁼⁽⁾ᵃᵇᶜᵈᵉᶠᵍʰⁱʲᵏˡᵐⁿᵒᵖʳˢᵗᵘᵛʷˣʸᶻᴬᴮᴰᴱᴳᴴᴵᴶᴷᴸᴹᴺᴼᴾᴿᵀᵁⱽᵂ",
)

_SUBSCRIPTS = str.maketrans(
    "0123456789+-=()aehijklmnoprstuvx",
    "₀₁₂₃₄₅₆₇₈₉₊₋₌₍₎ₐₑₕᵢⱼₖₗₘₙₒₚᵣₛₜᵤᵥₓ",
)

# ---------------------------------------------------------------------------
# Compiled patterns
# ---------------------------------------------------------------------------

_ENV_RE = re.compile(r"\\(?:begin|end)\{[^}]*\}")
_HSPACE_RE = re.compile(r"\\hspace\{[^}]*\}")
_DROP_RE = re.compile(r"\\(?:vspace|phantom|color)\{[^}]*\}")
_TEXTCOLOR_RE = re.compile(r"\\textcolor\{[^}]*\}\{([^}]*)\}")
_SQRT_RE = re.compile(r"\\sqrt\{([^}]*)\}")
_FRAC_RE = re.compile(r"\\frac\{([^}]*)\}\{([^}]*)\}")
_TEXT_COMMAND_RES: tuple[re.Pattern[str], ...] = tuple(
    re.compile(re.escape(cmd) + r"\{([^}]*)\}") for cmd in _TEXT_COMMANDS
)
_SUP_GROUP_RE = re.compile(r"\^\{([^}]*)\}")
_SUP_CHAR_RE = re.compile(r"\^([a-zA-Z0-9+\-=()])")
_SUB_GROUP_RE = re.compile(r"_\{([^}]*)\}")
_SUB_CHAR_RE = re.compile(r"_([a-zA-Z0-9+\-=()])")
_WHITESPACE_RE = re.compile(r"\s+")

_UNESCAPED_DOLLAR_RE = re.compile(r"(?:^|[^\\])\$")
_DISPLAY_BRACKET_RE = re.compile(r"\\\[(.*?)\\\]", re.DOTALL)
_DISPLAY_DOLLAR_RE = re.compile(r"\$\$(.*?)\$\$", re.DOTALL)
_INLINE_PAREN_RE = re.compile(r"\\\((.*?)\\\)", re.DOTALL)
_INLINE_DOLLAR_RE = re.compile(r"(^|[^\\])(\$[^$]+\$)")


def _replace_commands(s: str) -> str:
    s = _ENV_RE.sub("", s)

    # Alignment: \\ is a line break, & a column gap
    s = s.replace("\\\\", "\n").replace("&", " ")

    s = _HSPACE_RE.sub(" ", s)
    s = _DROP_RE.sub("", s)
    s = _TEXTCOLOR_RE.sub(r"\1", s)

    for old, new in _DELIMITER_SIZING:
        s = s.replace(old, new)

    s = _SQRT_RE.sub(r"√(\1)", s)
    s = _FRAC_RE.sub(r"(\1)/(\2)", s)
    for pattern in _TEXT_COMMAND_RES:
        s = pattern.sub(r"\1", s)

    for cmd, symbol in _COMMANDS:
        s = s.replace(cmd, symbol)

    for old, new in _ESCAPES:
        s = s.replace(old, new)
    return s


def _superscript_char(match: re.Match[str]) -> str:
    char = match.group(1)
    converted = char.translate(_SUPERSCRIPTS)
    return converted if converted != char else "^" + char


def _subscript_char(match: re.Match[str]) -> str:
    char = match.group(1)
    converted = char.translate(_SUBSCRIPTS)
    return converted if converted != char else "_" + char


def to_unicode(latex: str) -> str:
    """Convert one LaTeX math expression to Unicode text.

    Surrounding ``\\[ \\]``, ``$$``, ``$`` and ``\\( \\)`` delimiters are
    removed first.  Unknown commands are left in place.
    """
    s = latex
    for prefix, suffix in (("\\[", "\\]"), ("$$", "$$"), ("$", "$"), ("\\(", "\\)")):
        s = s.removeprefix(prefix).removesuffix(suffix)
    s = s.strip()

    s = _replace_commands(s)
    s = _SUP_GROUP_RE.sub(lambda m: m.group(1).translate(_SUPERSCRIPTS), s)
    s = _SUP_CHAR_RE.sub(_superscript_char, s)
    s = _SUB_GROUP_RE.sub(lambda m: m.group(1).translate(_SUBSCRIPTS), s)
    s = _SUB_CHAR_RE.sub(_subscript_char, s)
    return _WHITESPACE_RE.sub(" ", s).strip()


def contains_latex(text: str) -> bool:
    """Return True if *text* contains LaTeX math delimiters."""
    if any(marker in text for marker in ("\\[", "\\]", "$$", "\\(", "\\)")):
        return True
    return bool(_UNESCAPED_DOLLAR_RE.search(text))


def process_text(text: str) -> str:
    """Convert every delimited math expression inside *text*."""
    text = _DISPLAY_BRACKET_RE.sub(lambda m: to_unicode(m.group(0)), text)
    text = _DISPLAY_DOLLAR_RE.sub(lambda m: to_unicode(m.group(0)), text)
    text = _INLINE_PAREN_RE.sub(lambda m: to_unicode(m.group(0)), text)
    return _INLINE_DOLLAR_RE.sub(lambda m: m.group(1) + to_unicode(m.group(2)), text)
