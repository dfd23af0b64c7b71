"""Tests for the SOLID and DDD extractors."""

from archreview.validators.ddd_extractor import DddExtractor
from archreview.validators.policy import Thresholds
from archreview.validators.solid_extractor import SolidExtractor
from archreview.validators.source import SourceFile
from conftest import java, scan


def _solid(source: SourceFile, **thresholds):
    return SolidExtractor().extract(source, Thresholds(**thresholds))


def _ddd(source: SourceFile):
    return DddExtractor().extract(source, Thresholds())


class TestFieldInjection:
    def test_annotation_on_previous_line(self, field_injection_source: str) -> None:
        source = SourceFile.parse("UserService.java", field_injection_source)
        candidates = [c for c in _solid(source) if c.rule == "field_injection"]
        assert len(candidates) == 1
        assert candidates[0].values == {"field": "repository", "annotation": "@Autowired"}
        assert candidates[0].line_number == 3
        assert "@Autowired" in candidates[0].snippet

    def test_annotation_on_same_line(self) -> None:
        source = scan("""
            public class Mailer {
                @Inject private Transport transport;
                @Resource(name = "pool") private DataSource pool;
            }
        """)
        fields = [c.values["field"] for c in _solid(source) if c.rule == "field_injection"]
        assert fields == ["transport", "pool"]

    def test_stacked_annotations_before_the_field(self) -> None:
        source = scan("""
            public class PaymentService {
                @Autowired
                @Qualifier("primary")
                @Lazy
                private PaymentGateway gateway;
            }
        """)
        candidates = [c for c in _solid(source) if c.rule == "field_injection"]
        assert [(c.line_number, c.values["field"]) for c in candidates] == [(2, "gateway")]
        assert candidates[0].snippet == "@Autowired private PaymentGateway gateway;"

    def test_constructor_and_setter_injection_not_flagged(self) -> None:
        source = scan("""
            public class Billing {
                private final Ledger ledger;

                @Autowired
                public Billing(Ledger ledger) {
                    this.ledger = ledger;
                }

                @Autowired
                public void setClock(Clock clock) {
                }
            }
        """)
        assert [c for c in _solid(source) if c.rule == "field_injection"] == []

    def test_commented_annotation_ignored(self) -> None:
        source = scan("""
            public class Billing {
                // @Autowired
                private Ledger ledger;
            }
        """)
        assert _solid(source) == []


class TestClassLength:
    def test_declaration_to_closing_brace(self) -> None:
        body = "\n".join(f"    int field{n};" for n in range(8))
        source = SourceFile.parse("Big.java", java(
            "@Component\n"
            "public class Big {\n"
            f"{body}\n"
            "}\n"
        ))
        # Declared on line 2, closed on line 11: ten lines
        assert [c.values for c in _solid(source, max_class_length=9) if c.rule == "class_length"] == [
            {"name": "Big", "length": 10, "limit": 9}
        ]
        assert [c for c in _solid(source, max_class_length=10) if c.rule == "class_length"] == []


class TestEntities:
    def test_entity_without_id(self) -> None:
        source = scan("""
            @Entity
            @Table(name = "orders")
            public class Order {
                private String reference;

                public void cancel() {
                    status = CANCELLED;
                }
            }
        """)
        candidates = _ddd(source)
        assert [c.rule for c in candidates] == ["entity_without_id"]
        assert candidates[0].values == {"name": "Order"}
        assert candidates[0].line_number == 3

    def test_entity_with_id_and_behaviour(self) -> None:
        source = scan("""
            @Entity
            public class Order {
                @Id
                private Long id;

                public Long getId() { return id; }

                public void cancel() {
                    status = CANCELLED;
                }
            }
        """)
        assert _ddd(source) == []

    def test_subclass_entities_inherit_identity(self) -> None:
        source = scan("""
            @Entity
            public class Invoice extends BaseEntity {
                public void settle() { paid = true; }
            }
        """)
        assert _ddd(source) == []

    def test_anemic_entity(self) -> None:
        source = scan("""
            @Entity
            public class Customer {
                @Id
                private Long id;
                private String name;

                public Long getId() { return id; }
                public String getName() { return name; }
                public void setName(String name) { this.name = name; }
                public String toString() { return name; }
            }
        """)
        candidates = _ddd(source)
        assert [c.rule for c in candidates] == ["anemic_entity"]
        assert candidates[0].values == {"name": "Customer", "count": 3}

    def test_plain_classes_ignored(self) -> None:
        source = scan("""
            public class Helper {
                public String getName() { return "x"; }
            }
        """)
        assert _ddd(source) == []
