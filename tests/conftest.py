"""Fixtures partagées : sonde native simulée et isolation du logger."""

import logging

import pytest

from sysinfo_lite.collectors.platform.base import NativeProbe
from sysinfo_lite.core.logger import LOGGER_NAME


class FakeProbe(NativeProbe):
    """
    Sonde simulée pilotée par un dictionnaire

    Une donnée absente du dictionnaire est rapportée comme capacité absente ;
    une instance d'exception est levée à l'appel.
    """

    platform_name = "fake"

    def __init__(self, facts=None, adapters=None):
        super().__init__()
        self.facts = facts or {}
        self.adapters = adapters if adapters is not None else []

    def _fact(self, name):
        value = self.facts.get(name)
        if isinstance(value, Exception):
            raise value
        return value

    def cpu_vendor(self):
        return self._fact('cpu_vendor')

    def cpu_model(self):
        return self._fact('cpu_model')

    def cpu_physical_cores(self):
        return self._fact('cpu_physical_cores')

    def cpu_logical_cores(self):
        return self._fact('cpu_logical_cores')

    def cpu_frequency(self):
        return self._fact('cpu_frequency')

    def ram_total(self):
        return self._fact('ram_total')

    def ram_available(self):
        return self._fact('ram_available')

    def gpu_adapters(self):
        if isinstance(self.adapters, Exception):
            raise self.adapters
        return self.adapters

    def os_family(self):
        return self._fact('os_family')

    def os_name(self):
        return self._fact('os_name')

    def os_version(self):
        return self._fact('os_version')

    def os_kernel(self):
        return self._fact('os_kernel')

    def os_architecture(self):
        return self._fact('os_architecture')


@pytest.fixture
def fake_probe():
    return FakeProbe


@pytest.fixture
def logger():
    return logging.getLogger(f"{LOGGER_NAME}.tests")


@pytest.fixture(autouse=True)
def clean_package_logger():
    """Retire les handlers ajoutés par InfoLogger entre deux tests"""
    package_logger = logging.getLogger(LOGGER_NAME)
    level = package_logger.level
    yield
    for handler in list(package_logger.handlers):
        if not isinstance(handler, logging.NullHandler):
            package_logger.removeHandler(handler)
            handler.close()
    package_logger.setLevel(level)
