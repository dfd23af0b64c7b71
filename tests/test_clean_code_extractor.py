"""Tests for the clean code extractor."""

from archreview.validators.clean_code_extractor import CleanCodeExtractor
from archreview.validators.policy import Thresholds
from archreview.validators.source import SourceFile
from conftest import java, scan


def _extract(source: SourceFile, **thresholds):
    return CleanCodeExtractor().extract(source, Thresholds(**thresholds))


def _rules(candidates, rule: str):
    return [c for c in candidates if c.rule == rule]


def _method_with_body(lines: int) -> SourceFile:
    body = "\n".join(f"        step{n}();" for n in range(lines))
    return SourceFile.parse("Steps.java", java(
        "public class Steps {\n"
        "    public void run() {\n"
        f"{body}\n"
        "    }\n"
        "}\n"
    ))


class TestMethodLength:
    def test_exactly_at_limit_is_not_flagged(self) -> None:
        candidates = _extract(_method_with_body(10), max_method_length=10)
        assert _rules(candidates, "method_length") == []

    def test_one_over_limit_is_flagged(self) -> None:
        candidates = _rules(_extract(_method_with_body(11), max_method_length=10), "method_length")
        assert len(candidates) == 1
        assert candidates[0].values == {"name": "run", "length": 11, "limit": 10}
        assert candidates[0].line_number == 2

    def test_comment_lines_count(self, long_method_source: str) -> None:
        source = SourceFile.parse("TestService.java", long_method_source)
        candidates = _rules(_extract(source, max_method_length=10), "method_length")
        assert candidates[0].values["length"] == 12


class TestParameterCount:
    def test_counts_formal_parameters(self, long_method_source: str) -> None:
        source = SourceFile.parse("TestService.java", long_method_source)
        candidates = _rules(_extract(source, max_parameters=3), "parameter_count")
        assert len(candidates) == 1
        assert candidates[0].values["count"] == 4

    def test_generic_commas_do_not_count(self) -> None:
        source = scan("""
            class Stats {
                void merge(Map<String, Integer> left, Map<String, Integer> right) {
                }
            }
        """)
        assert _rules(_extract(source, max_parameters=2), "parameter_count") == []


class TestNesting:
    def test_depth_four_flagged_once_at_region_root(self, deep_nesting_source: str) -> None:
        source = SourceFile.parse("AuthenticationService.java", deep_nesting_source)
        candidates = _rules(_extract(source), "deep_nesting")
        assert len(candidates) == 1
        assert candidates[0].values == {"depth": 4}
        assert candidates[0].line_number == 3

    def test_depth_three_not_flagged(self) -> None:
        source = scan("""
            class A {
                void f() {
                    for (Item item : items) {
                        while (item.busy()) {
                            if (item.done()) {
                                return;
                            }
                        }
                    }
                }
            }
        """)
        assert _rules(_extract(source), "deep_nesting") == []

    def test_counted_for_loops_add_depth(self) -> None:
        source = scan("""
            class Grid {
                void walk(int[][] cells) {
                    int total = 0;
                    for (int r = 0; r < cells.length; r++) {
                        if (cells[r] != null) {
                            if (cells[r].length > 2) {
                                if (total < limit) {
                                    total++;
                                }
                            }
                        }
                    }
                }
            }
        """)
        candidates = _rules(_extract(source), "deep_nesting")
        assert [(c.line_number, c.values["depth"]) for c in candidates] == [(4, 4)]

    def test_try_blocks_do_not_add_depth(self) -> None:
        source = scan("""
            class A {
                void f() {
                    if (a) {
                        try {
                            if (b) {
                                if (c) {
                                    go();
                                }
                            }
                        } catch (Exception e) {
                            log(e);
                        }
                    }
                }
            }
        """)
        assert _rules(_extract(source), "deep_nesting") == []

    def test_reports_maximum_depth_of_region(self) -> None:
        source = scan("""
            class A {
                void f() {
                    if (a) {
                        if (b) {
                            if (c) {
                                if (d) {
                                    if (e) {
                                        go();
                                    }
                                }
                            }
                        }
                    }
                }
            }
        """)
        candidates = _rules(_extract(source), "deep_nesting")
        assert [c.values["depth"] for c in candidates] == [5]


class TestMagicNumbers:
    def test_every_integer_literal_is_a_candidate(self) -> None:
        source = scan("""
            class A {
                int f() {
                    int limit = 42;
                    return limit * 999 + -7 - 3;
                }
            }
        """)
        literals = [c.literal for c in _rules(_extract(source), "magic_number")]
        assert literals == ["42", "999", "-7", "3"]

    def test_skips_strings_comments_floats_and_constants(self) -> None:
        source = scan("""
            class A {
                private static final int MAX = 50;
                double rate = 0.15;
                String code = "E404"; // retry 3 times
                long big = 0xFF;
            }
        """)
        assert _rules(_extract(source), "magic_number") == []

    def test_description_value_matches_literal(self) -> None:
        source = scan("""
            class A {
                void f() { sleep(250L); }
            }
        """)
        candidate = _rules(_extract(source), "magic_number")[0]
        assert candidate.values == {"number": "250"}
        assert candidate.literal == "250"


class TestNaming:
    def test_vague_method_names(self) -> None:
        source = scan("""
            class A {
                public void process() { }
                public void handle2() { }
                public void processOrder() { }
            }
        """)
        names = [c.values["name"] for c in _rules(_extract(source), "poor_method_name")]
        assert names == ["process", "handle2"]

    def test_single_letter_identifiers(self) -> None:
        source = scan("""
            class A {
                void f(String a, int i) {
                    for (int j = 0; j < 3; j++) { }
                    double d = 2.0;
                    try { run(); } catch (Exception e) { log(e); }
                }
            }
        """)
        names = [c.values["name"] for c in _rules(_extract(source), "short_identifier")]
        assert names == ["a", "d"]


class TestEmptyCatch:
    def test_empty_and_comment_only_catch_blocks(self) -> None:
        source = scan("""
            class A {
                void f() {
                    try { run(); } catch (IOException e) { }
                    try {
                        run();
                    } catch (IllegalStateException e) {
                        // ignored
                    }
                    try { run(); } catch (Exception e) { log(e); }
                }
            }
        """)
        candidates = _rules(_extract(source), "empty_catch")
        assert [c.values["exception"] for c in candidates] == ["IOException", "IllegalStateException"]


class TestDuplicates:
    def test_repeated_five_line_block(self) -> None:
        block = "\n".join(f"        total += item{n}.price();" for n in range(5))
        source = SourceFile.parse("Cart.java", java(
            "class Cart {\n"
            "    int first() {\n"
            f"{block}\n"
            "    }\n"
            "    int second() {\n"
            f"{block}\n"
            "    }\n"
            "}\n"
        ))
        candidates = _rules(_extract(source), "duplicate_block")
        assert len(candidates) == 1
        assert candidates[0].values == {"first": 3, "first_end": 7, "second": 10}

    def test_four_repeated_lines_are_not_a_block(self) -> None:
        block = "\n".join(f"        total += item{n}.price();" for n in range(4))
        source = SourceFile.parse("Cart.java", java(
            "class Cart {\n"
            f"    int first() {{\n{block}\n    }}\n"
            f"    int second() {{\n{block}\n    }}\n"
            "}\n"
        ))
        assert _rules(_extract(source), "duplicate_block") == []
