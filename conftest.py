import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run tests marked as integration (fetches the real seed source over the network).",
    )


def pytest_configure(config):
    config.addinivalue_line(
        "markers",
        "integration: tests that fetch the live seed source (DEFAULT_SEED_SOURCE_URL)"
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--run-integration"):
        return

    skip_network = pytest.mark.skip(
        reason="needs network access to the seed source (use --run-integration)"
    )
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_network)
