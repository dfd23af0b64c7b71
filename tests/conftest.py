"""Shared test fixtures and configuration."""

import textwrap

import pytest
import structlog

from archreview.validators.policy_loader import parse_policy
from archreview.validators.source import SourceFile


def java(text: str) -> str:
    """Dedent an inline Java snippet."""
    return textwrap.dedent(text).lstrip("\n")


def make_policy(**sections):
    """Build a policy from camelCase configuration sections."""
    return parse_policy(sections)


def scan(text: str, file_name: str = "Sample.java") -> SourceFile:
    return SourceFile.parse(file_name, java(text))


@pytest.fixture(autouse=True)
def _reset_logging():
    """Undo logging configuration done by CLI runs so later tests log to live streams."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def long_method_source() -> str:
    lines = "\n".join(f"        // Line {n}" for n in range(1, 13))
    return java(
        "public class TestService {\n"
        "    public void shortMethod(String a, String b, String c, String d) {\n"
        f"{lines}\n"
        "    }\n"
        "}\n"
    )


@pytest.fixture
def deep_nesting_source() -> str:
    return java("""
        public class AuthenticationService {
            public void authenticate() {
                if (user != null) {
                    if (user.isActive()) {
                        if (user.hasRole("admin")) {
                            if (user.isNotLocked()) {
                                // Deep nesting in critical file
                                login(user);
                            }
                        }
                    }
                }
            }
        }
    """)


@pytest.fixture
def field_injection_source() -> str:
    return java("""
        @Service
        public class UserService {
            @Autowired
            private UserRepository repository; // Field injection

            public User getData(String id) {   // Poor naming
                return repository.findById(id);
            }
        }
    """)


@pytest.fixture
def normal_source() -> str:
    return java("""
        @Service
        public class NormalService {
            private final UserRepository repository;

            public NormalService(UserRepository repository) {
                this.repository = repository;
            }

            public User findUser(Long id) {
                return repository.findById(id).orElse(null);
            }
        }
    """)


@pytest.fixture
def problematic_source() -> str:
    return java("""
        @Service
        public class ProblematicService {
            private String password = "hardcoded123";    // Security issue

            public List<User> getUsers() {
                return jdbcTemplate.query("SELECT * FROM users", mapper); // Performance issue
            }

            @Autowired
            private UserRepository repository;           // DI issue
        }
    """)
