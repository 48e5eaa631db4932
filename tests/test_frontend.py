"""
Frontend tests — tree-sitter Java/C source to SyntaxNode trees, and the
analyzer end to end on real parses.
"""

import os
import sys
import unittest

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

from statement_lint.frontend import (
    UnsupportedLanguageError, language_for_path, parse_source, supported_languages,
)
from statement_lint.syntax_tree import NodeKind
from statement_lint.checker import StatementChecker
from statement_lint.config import LintConfig

K = NodeKind


def java_method(*body_lines: str) -> str:
    """Wrap statements in a class/method; the first body line is line 3."""
    return "class Example {\n    void method() {\n" + \
        "".join(f"        {line}\n" for line in body_lines) + "    }\n}\n"


def find(root, label):
    return next(node for node in root.iter_preorder() if node.label == label)


class TestTreeShape(unittest.TestCase):

    def test_expression_statement_is_split(self):
        root, has_error = parse_source(java_method("foo(); bar();"), "java")
        self.assertFalse(has_error)
        body = find(root, "block")
        self.assertIs(body.kind, K.STATEMENT_BLOCK)
        kinds = [c.kind for c in body.children]
        self.assertEqual(kinds, [
            K.TOKEN,
            K.STATEMENT, K.STATEMENT_TERMINATOR,
            K.STATEMENT, K.STATEMENT_TERMINATOR,
            K.TOKEN,
        ])
        terminators = [c for c in body.children if c.kind is K.STATEMENT_TERMINATOR]
        self.assertEqual([(t.line, t.column) for t in terminators], [(3, 14), (3, 21)])

    def test_for_statement_clauses(self):
        root, _ = parse_source(java_method("for (int i = 0; i < n; i++) x++;"), "java")
        loop = find(root, "for_statement")
        self.assertEqual([c.kind for c in loop.children], [
            K.TOKEN, K.TOKEN,
            K.FOR_INITIALIZER, K.STATEMENT_TERMINATOR,
            K.FOR_CONDITION, K.STATEMENT_TERMINATOR,
            K.FOR_ITERATOR, K.TOKEN,
            K.STATEMENT, K.STATEMENT_TERMINATOR,
        ])

    def test_empty_for_header(self):
        root, _ = parse_source(java_method("for (;;) ;"), "java")
        loop = find(root, "for_statement")
        kinds = [c.kind for c in loop.children]
        self.assertEqual(kinds[2:7], [
            K.FOR_INITIALIZER, K.STATEMENT_TERMINATOR,
            K.FOR_CONDITION, K.STATEMENT_TERMINATOR,
            K.FOR_ITERATOR,
        ])
        self.assertIs(kinds[-1], K.EMPTY_STATEMENT)
        for clause in loop.children[2:7:2]:
            self.assertEqual(clause.children, [])
            self.assertEqual(clause.line, 3)

    def test_c_for_with_expression_initializer(self):
        root, _ = parse_source("void f(void) {\n    for (i = 0, j = 1; i < 3; i++) { }\n}\n", "c")
        loop = find(root, "for_statement")
        init = next(c for c in loop.children if c.kind is K.FOR_INITIALIZER)
        self.assertEqual(init.line, 2)
        self.assertTrue(init.children)
        after = loop.children[loop.children.index(init) + 1]
        self.assertIs(after.kind, K.STATEMENT_TERMINATOR)

    def test_do_statement(self):
        root, _ = parse_source(java_method("do { x--; } while (x > 0);"), "java")
        loop = find(root, "do_statement")
        self.assertEqual([c.kind for c in loop.children], [
            K.TOKEN, K.STATEMENT_BLOCK, K.DO_WHILE_TRAILER, K.OTHER, K.STATEMENT_TERMINATOR,
        ])

    def test_argument_list_holds_only_arguments(self):
        root, _ = parse_source(java_method("foo(a, b);"), "java")
        args = next(x for x in root.iter_preorder() if x.kind is K.ARGUMENT_LIST)
        self.assertEqual([c.label for c in args.children], ["identifier", "identifier"])

    def test_lambda_line_is_arrow_line(self):
        source = java_method("run((x)", "    -> { go(); });")
        root, _ = parse_source(source, "java")
        args = next(x for x in root.iter_preorder() if x.kind is K.ARGUMENT_LIST)
        self.assertIs(args.first_child.kind, K.LAMBDA)
        self.assertEqual(args.first_child.line, 4)

    def test_comments_are_dropped(self):
        root, _ = parse_source(java_method("foo(); // trailing", "/* block */ bar();"), "java")
        labels = {node.label for node in root.iter_preorder()}
        self.assertNotIn("line_comment", labels)
        self.assertNotIn("block_comment", labels)

    def test_bare_semicolon_is_empty_statement(self):
        root, _ = parse_source(java_method("foo();;"), "java")
        body = find(root, "block")
        self.assertIs(body.children[-2].kind, K.EMPTY_STATEMENT)

    def test_c_empty_statement(self):
        root, _ = parse_source("void f(void) {\n    ;\n}\n", "c")
        empties = [x for x in root.iter_preorder() if x.kind is K.EMPTY_STATEMENT]
        self.assertEqual(len(empties), 1)
        self.assertEqual(empties[0].line, 2)

    def test_unsupported_language(self):
        with self.assertRaises(UnsupportedLanguageError):
            parse_source("x = 1", "cobol")
        self.assertIn("java", supported_languages())

    def test_language_for_path(self):
        self.assertEqual(language_for_path("src/Main.JAVA"), "java")
        self.assertEqual(language_for_path("lib/util.h"), "c")
        self.assertIsNone(language_for_path("README.md"))
        self.assertEqual(language_for_path("a.cpp", {".cpp": "c"}), "c")


class TestJavaEndToEnd(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.checker = StatementChecker(PROJECT_ROOT, config=LintConfig(honor_preprocessor=False))

    def check(self, *body_lines):
        return [v.line_number for v in self.checker.check_source(java_method(*body_lines), "java")]

    def test_one_statement_per_line(self):
        self.assertEqual(self.check("int a = 1;", "int b = 2;", "a = b;"), [])

    def test_two_assignments(self):
        self.assertEqual(self.check("int a, b;", "a = 1; b = 2;"), [4])

    def test_statement_before_for_loop(self):
        """good(); for (...) { bad(); } — exactly one violation."""
        self.assertEqual(self.check("good(); for (int i = 0; i < 3; i++) { bad(); }"), [3])

    def test_for_loop_alone(self):
        self.assertEqual(self.check("good();", "for (int i = 0; i < 3; i++) { bad(); }"), [])

    def test_for_body_second_statement(self):
        self.assertEqual(self.check("for (int i = 0; i < 3; i++) { good(); bad(); }"), [3])

    def test_do_while(self):
        self.assertEqual(self.check("do { good(); } while (false);"), [])

    def test_statement_after_do_while(self):
        self.assertEqual(self.check("do { good(); } while (false); bad();"), [3])

    def test_lambda_argument(self):
        self.assertEqual(
            self.check("cb.addActionListener((e) -> { good(); }); bad();"), [3])

    def test_lambda_argument_alone(self):
        self.assertEqual(self.check("cb.addActionListener((e) -> { good(); });"), [])

    def test_multiline_declaration(self):
        self.assertEqual(self.check("int var1 = 1", "; var2 = 2;"), [4])

    def test_class_fields(self):
        source = "class Fields {\n    int a; int b;\n    int c;\n}\n"
        violations = self.checker.check_source(source, "java")
        self.assertEqual([v.line_number for v in violations], [2])

    def test_violation_column_points_at_terminator(self):
        violations = self.checker.check_source(java_method("a(); b();"), "java")
        self.assertEqual(len(violations), 1)
        self.assertEqual(violations[0].column, 17)

    def test_column_counts_characters_not_bytes(self):
        line = '        String s = "héllo wörld"; b();'
        violations = self.checker.check_source(java_method(line.strip()), "java")
        self.assertEqual(len(violations), 1)
        self.assertEqual(violations[0].column, line.rindex(";") + 1)
        self.assertEqual(line[violations[0].column - 1], ";")


class TestCEndToEnd(unittest.TestCase):

    def test_c_source(self):
        checker = StatementChecker(PROJECT_ROOT, config=LintConfig(honor_preprocessor=False))
        source = (
            "void f(void) {\n"
            "    int a = 1; int b = 2;\n"
            "    for (int i = 0; i < 3; i++) { a++; }\n"
            "    do { b--; } while (b > 0);\n"
            "}\n"
        )
        self.assertEqual([v.line_number for v in checker.check_source(source, "c")], [2])


if __name__ == "__main__":
    unittest.main()
