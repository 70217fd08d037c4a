"""
Pytest configuration and shared fixtures for all tests.
"""

import pytest


class FirstChoiceRandom:
    """
    Deterministic stand-in for the `random` module.

    choice() always returns the first element and randint() the lower bound,
    so replacement values can be asserted exactly.
    """

    def __init__(self):
        self.calls = []

    def choice(self, seq):
        self.calls.append(("choice", list(seq)))
        return seq[0]

    def randint(self, a, b):
        self.calls.append(("randint", a, b))
        return a


@pytest.fixture
def stub_rng():
    """Random source that always picks the first option / lowest number."""
    return FirstChoiceRandom()


@pytest.fixture
def contacts_table():
    """Table laid out the way the default schema expects (2/4 numeric, 3 email)."""
    return [
        ["id", "name", "age", "email", "salary"],
        ["1", "Alice", "30", "alice@example.com", "50000"],
        ["2", "Bob", "", "bob@example.com", "60000"],
        ["3", "Carol", "forty", "carol@", "70000"],
        ["1", "Alice", "30", "alice@example.com", "50000"],
    ]


@pytest.fixture
def messy_csv():
    """CSV text with whitespace, missing markers, a bad number and a duplicate row."""
    return (
        "id,name,score,joined\n"
        "1,  Alice  ,90,2023-01-15\n"
        "2,Bob,NULL,2023-02-20\n"
        "3,Carol,abc,2023-03-05\n"
        "\n"
        "4,Dave,75,2023-04-01\n"
        "4,Dave,75,2023-04-01\n"
    )
