"""
Rule Catalog

Message texts and the human-readable explanation for the rules this
package implements.  The analyzer only knows message keys; everything a
user reads comes from here.
"""

from typing import Dict, Optional, List
from dataclasses import dataclass, field


@dataclass
class StyleRule:
    rule_id: str
    title: str
    category: str                          # "Coding" | "Whitespace" | ...
    message_key: str
    message: str
    rationale: str
    non_compliant: str                     # code example
    compliant: str                         # fixed code example
    exemptions: List[str] = field(default_factory=list)


_RULES: Dict[str, StyleRule] = {}
_MESSAGES: Dict[str, str] = {}


def _add(rule: StyleRule):
    _RULES[rule.rule_id] = rule
    _MESSAGES[rule.message_key] = rule.message


# ───────────────────────────────────────────────────────────────────────
#  OneStatementPerLine
# ───────────────────────────────────────────────────────────────────────

_add(StyleRule(
    rule_id="OneStatementPerLine",
    title="Only one statement per line",
    category="Coding",
    message_key="multiple.statements.line",
    message="Only one statement per line allowed.",
    rationale=(
        "Several statements squeezed onto one line are easy to misread in "
        "review, hide control flow from debuggers that step per line, and "
        "make diffs noisier than they need to be."
    ),
    non_compliant="""\
int var1; int var2;
var1 = 1; var2 = 2;
good(); for (int i = 0; i < 3; i++) { bad(); }""",
    compliant="""\
int var1;
int var2;
var1 = 1;
var2 = 2;
for (int i = 0; i < 3; i++) { good(); }""",
    exemptions=[
        "The separators inside a `for (init; cond; iter)` header.",
        "The `while (cond);` trailer of a `do { ... } while (cond);` loop.",
        "The first statement of a `for` body block written on the header line.",
        "A one-line lambda body passed as the first argument of a call.",
    ],
))


# ═══════════════════════════════════════════════════════════════════════
#  Public API
# ═══════════════════════════════════════════════════════════════════════

def get_rule(rule_id: str) -> Optional[StyleRule]:
    return _RULES.get(rule_id)


def get_all_rules() -> Dict[str, StyleRule]:
    return dict(_RULES)


def format_message(message_key: str) -> str:
    """Resolve a message key; unknown keys are returned unchanged."""
    return _MESSAGES.get(message_key, message_key)


def format_rule_explanation(rule_id: str) -> str:
    """Return a markdown explanation for *rule_id*."""
    rule = get_rule(rule_id)
    if rule is None:
        known = ", ".join(sorted(_RULES))
        return f"Error: Unknown rule '{rule_id}'. Known rules: {known}"

    text = f"## {rule.rule_id} — {rule.title}\n\n"
    text += f"**Category:** {rule.category}  \n"
    text += f"**Message:** {rule.message} (`{rule.message_key}`)\n\n"
    text += f"### Rationale\n{rule.rationale}\n\n"
    text += f"### Non-compliant\n```java\n{rule.non_compliant}\n```\n\n"
    text += f"### Compliant\n```java\n{rule.compliant}\n```\n"
    if rule.exemptions:
        text += "\n### Not reported\n"
        for item in rule.exemptions:
            text += f"- {item}\n"
    return text
