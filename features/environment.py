"""
Behave environment configuration for register.it DNS Manager scenarios.

Scenarios run against the simulated control panel, so no browser or
register.it account is needed.
"""

import logging
import shutil
import tempfile
from pathlib import Path

import yaml

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def before_all(context):
    """Set up test environment before all tests."""
    context.base_dir = Path(__file__).parent.parent
    context.test_data_dir = Path(tempfile.mkdtemp(prefix="registerit_dns_"))

    context.test_domain = "example.com"
    context.test_config = {
        "dns_providers": {
            "mock": {
                "username": "mock",
                "password": "mock",
                "domain": context.test_domain,
                "records": [],
            }
        },
        "default_provider": "mock",
        "logging": {
            "level": "DEBUG",
            "file": str(context.test_data_dir / "test_dns_manager.log"),
        },
    }

    context.test_config_file = context.test_data_dir / "test_config.yaml"
    with open(context.test_config_file, "w") as f:
        yaml.dump(context.test_config, f)

    logger.info("Test environment setup complete")


def before_scenario(context, scenario):
    """Set up each test scenario."""
    context.scenario_name = scenario.name
    context.records = []
    context.error = None
    context.result = None
    context.listed = []

    logger.info(f"Starting scenario: {scenario.name}")


def after_scenario(context, scenario):
    """Release the simulated browser after each scenario."""
    provider = getattr(context, "provider", None)
    if provider is not None:
        provider.close()
        context.provider = None

    logger.info(f"Completed scenario: {scenario.name}")


def after_all(context):
    """Clean up test environment after all tests."""
    shutil.rmtree(context.test_data_dir, ignore_errors=True)
    logger.info("Test environment cleanup complete")
