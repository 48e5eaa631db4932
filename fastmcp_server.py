"""
One Statement Per Line Checker — MCP Server

Exposes tools to MCP clients via the Model Context Protocol:

  1. configure        — set the workspace root (+ optional JSON config)
  2. check_file       — check one file, list violations with source excerpts
  3. check_source     — check a snippet of Java or C source
  4. check_workspace  — check every supported file under the workspace
  5. list_violations  — show violations from the last workspace run
  6. explain_rule     — rule rationale, examples and exemptions
  7. export_report    — write the last results as {"issues": [...]} JSON
"""

from mcp.server.fastmcp import FastMCP
import os
import sys

# Ensure the package is importable when run as a script
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from statement_lint.checker import StatementChecker
from statement_lint.config import load_config
from statement_lint.context_provider import ContextProvider
from statement_lint.frontend import UnsupportedLanguageError, supported_languages
from statement_lint.report import ViolationReport
from statement_lint.rule_catalog import format_rule_explanation
from statement_lint.statement_analyzer import RULE_ID

# ═══════════════════════════════════════════════════════════════════════
#  Server Setup
# ═══════════════════════════════════════════════════════════════════════

mcp = FastMCP("One Statement Per Line Checker")

checker = None
context_provider = None
report = ViolationReport()


def _format_violations(file_path: str, violations, context_lines: int = 0) -> str:
    out = f"### {file_path} — {len(violations)} violation(s)\n\n"
    for v in violations:
        out += f"- **Line {v.line_number}** (col {v.column}): {v.message}\n"
        if context_provider is None:
            continue
        if context_lines > 0:
            excerpt = context_provider.get_code_context(file_path, v.line_number, context_lines)
        else:
            excerpt = context_provider.format_excerpt(file_path, v.line_number, v.column)
        if excerpt and not excerpt.startswith("Error"):
            out += f"```\n{excerpt.rstrip()}\n```\n"
    return out


# ═══════════════════════════════════════════════════════════════════════
#  Tool 1 — Configure
# ═══════════════════════════════════════════════════════════════════════

@mcp.tool()
def configure(workspace_root: str, config_path: str = "") -> str:
    """
    Sets the workspace to check and (optionally) loads a JSON config.

    Args:
        workspace_root: Root directory of the source tree.
        config_path:    Optional path to a JSON config file (enabled,
                        extensions, skip_dirs, honor_preprocessor,
                        include_dirs, defines, max_file_bytes).
    """
    global checker, context_provider, report

    if not os.path.isdir(workspace_root):
        return f"Error: Workspace root not found at {workspace_root}"
    if config_path and not os.path.exists(config_path):
        return f"Error: Config file not found at {config_path}"

    try:
        config = load_config(config_path or None)
        checker = StatementChecker(workspace_root, config=config)
        context_provider = ContextProvider(workspace_root)
        report = ViolationReport()
    except Exception as e:
        return f"Error configuring checker: {e}"

    state = "enabled" if config.enabled else "DISABLED"
    exts = ", ".join(sorted(config.extensions))
    return (
        f"Workspace set to {workspace_root}.\n"
        f"{RULE_ID} is {state}. File types: {exts}.\n"
        f"C preprocessing: {'on' if config.honor_preprocessor else 'off'}."
    )


# ═══════════════════════════════════════════════════════════════════════
#  Tool 2 — Check File
# ═══════════════════════════════════════════════════════════════════════

@mcp.tool()
def check_file(file_path: str) -> str:
    """
    Checks one file for lines holding more than one statement.

    Args:
        file_path: Path of the file, relative to the workspace root or absolute.
    """
    if checker is None:
        return "Error: No workspace configured. Call configure first."

    try:
        violations = checker.check_file(file_path)
    except Exception as e:
        return f"Error checking {file_path}: {e}"

    rel = checker.relative_path(file_path)
    report.clear_file(rel)
    report.extend(violations)
    if not violations:
        return f"No violations found in {rel}"
    return _format_violations(rel, violations)


# ═══════════════════════════════════════════════════════════════════════
#  Tool 3 — Check Source Snippet
# ═══════════════════════════════════════════════════════════════════════

@mcp.tool()
def check_source(source: str, language: str = "java") -> str:
    """
    Checks a source snippet without touching the workspace.

    Args:
        source:   The code to check.
        language: Grammar to parse with ("java" or "c").
    """
    local = checker if checker is not None else StatementChecker(os.getcwd())
    try:
        violations = local.check_source(source, language.lower())
    except UnsupportedLanguageError:
        return f"Error: Unsupported language '{language}'. Use one of: {', '.join(supported_languages())}"
    except Exception as e:
        return f"Error checking source: {e}"

    if not violations:
        return "No violations found."
    lines = source.splitlines()
    out = f"Found {len(violations)} violation(s):\n\n"
    for v in violations:
        text = lines[v.line_number - 1].rstrip() if v.line_number <= len(lines) else ""
        out += f"- Line {v.line_number}, col {v.column}: {v.message}\n"
        if text:
            out += f"  `{text.strip()}`\n"
    return out


# ═══════════════════════════════════════════════════════════════════════
#  Tool 4 — Check Workspace
# ═══════════════════════════════════════════════════════════════════════

@mcp.tool()
def check_workspace() -> str:
    """
    Checks every supported file under the configured workspace root and
    keeps the results for list_violations / export_report.
    """
    global report

    if checker is None:
        return "Error: No workspace configured. Call configure first."

    try:
        report = checker.check_workspace()
    except Exception as e:
        return f"Error checking workspace: {e}"

    summary = report.get_summary()
    if summary["total_violations"] == 0:
        return "No violations found in the workspace."

    out = (
        f"## {RULE_ID}: {summary['total_violations']} violation(s) "
        f"in {summary['files_affected']} file(s)\n\n"
        "| File | Violations |\n"
        "|------|------------|\n"
    )
    for path, count in sorted(summary["by_file"].items()):
        out += f"| {path} | {count} |\n"
    return out


# ═══════════════════════════════════════════════════════════════════════
#  Tool 5 — List Violations
# ═══════════════════════════════════════════════════════════════════════

@mcp.tool()
def list_violations(file_path: str, context_lines: int = 0) -> str:
    """
    Lists the recorded violations for a file (from check_file or
    check_workspace).

    Args:
        file_path:     Relative path of the file in the workspace.
        context_lines: Lines of surrounding code to show per violation
                       (0 shows only the offending line with a caret).
    """
    if checker is None:
        return "Error: No workspace configured. Call configure first."

    violations = report.get_violations_by_file(file_path)
    if not violations:
        return f"No violations recorded for {file_path}"
    return _format_violations(violations[0].file_path or file_path, violations, context_lines)


# ═══════════════════════════════════════════════════════════════════════
#  Tool 6 — Explain Rule
# ═══════════════════════════════════════════════════════════════════════

@mcp.tool()
def explain_rule(rule_id: str = RULE_ID) -> str:
    """
    Explains a rule: rationale, compliant and non-compliant examples, and
    the constructs it deliberately does not report.

    Args:
        rule_id: Rule to explain (default "OneStatementPerLine").
    """
    return format_rule_explanation(rule_id)


# ═══════════════════════════════════════════════════════════════════════
#  Tool 7 — Export Report
# ═══════════════════════════════════════════════════════════════════════

@mcp.tool()
def export_report(output_path: str) -> str:
    """
    Writes the recorded violations as JSON ({"issues": [...]}).

    Args:
        output_path: Destination file path.
    """
    try:
        report.write_json(output_path)
    except OSError as e:
        return f"Error writing report: {e}"
    return f"Wrote {len(report.get_all_violations())} violation(s) to {output_path}"


if __name__ == "__main__":
    # Debug: Print loaded tools to stderr (visible in MCP logs)
    try:
        if hasattr(mcp, "_tool_manager") and hasattr(mcp._tool_manager, "_tools"):
            tools = mcp._tool_manager._tools.keys()
            print(f"DEBUG: Checker starting with {len(tools)} tools: {list(tools)}", file=sys.stderr)
        else:
            print("DEBUG: Checker starting (cannot inspect tools)", file=sys.stderr)
    except Exception as e:
        print(f"DEBUG: Error inspecting tools: {e}", file=sys.stderr)

    mcp.run()
