"""Shared test fixtures for the ldquery test suite."""

import os

import pytest


# Keep INFO logging out of CLI output captured by tests
os.environ.setdefault("LDQUERY_LOG_LEVEL", "WARNING")

from ldquery.graph import normalize  # noqa: E402
from ldquery.settings import LDQuerySettings  # noqa: E402


def _incident(node_id, title, date, severity=None, **links):
    node = {
        "@id": node_id,
        "@type": "aiid:Incident",
        "title": title,
        "date": [{"@value": date}],
    }
    if severity is not None:
        node["severity"] = severity
    node.update(links)
    return node


ACME = {"@id": "org:acme", "@type": "core:Organization", "name": "Acme"}
GLOBEX = {"@id": "org:globex", "@type": "core:Organization", "name": "Globex"}


@pytest.fixture
def settings():
    return LDQuerySettings()


@pytest.fixture
def scenario_nodes():
    """Three incidents: two deployed by Acme, one by Globex."""
    return [
        _incident("inc:1", "Chatbot leak", "2021-03-04", deployedBy=dict(ACME)),
        _incident("inc:2", "Face mismatch", "2021-07-01", deployedBy={"@id": "org:acme"}),
        _incident("inc:3", "Route error", "2022-01-15", deployedBy=dict(GLOBEX)),
    ]


@pytest.fixture
def incident_nodes():
    """Incidents with organizations, affected parties and reports.

    ``inc:4`` has no deployer; ``inc:2`` references Acme by id only.
    """
    return [
        _incident(
            "inc:1", "Chatbot leak", "2021-03-04", severity=3,
            deployedBy=dict(ACME),
            reports=[{"@id": "rep:1", "@type": "aiid:Report", "title": "Leak report", "wordCount": 100}],
        ),
        _incident(
            "inc:2", "Face mismatch", "2021-07-01", severity=[{"@value": 5}],
            deployedBy={"@id": "org:acme"},
            affectedParties=[{"@id": "org:public", "@type": "core:Organization", "name": "General public"}],
            reports=[
                {"@id": "rep:2", "@type": "aiid:Report", "title": "Mismatch report", "wordCount": 250},
                {"@id": "rep:3", "@type": "aiid:Report", "title": "Mismatch follow-up", "wordCount": 80},
            ],
        ),
        _incident("inc:3", "Route error", "2022-01-15", severity=2, deployedBy=dict(GLOBEX)),
        _incident("inc:4", "Unattributed", "2023-05-05"),
    ]


@pytest.fixture
def scenario_collection(scenario_nodes, settings):
    return normalize(scenario_nodes, settings)


@pytest.fixture
def incident_collection(incident_nodes, settings):
    return normalize(incident_nodes, settings)
