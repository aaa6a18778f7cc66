"""Tests de la sonde native Linux (lecture des fichiers et sorties de commandes)."""

from collections import namedtuple
from unittest.mock import patch

import psutil
import pytest

from sysinfo_lite.collectors import GpuCollector, RamCollector
from sysinfo_lite.collectors.platform.base import Measurement
from sysinfo_lite.collectors.platform.linux import LinuxProbe, NVIDIA_SMI_QUERY, parse_lspci_description
from sysinfo_lite.exceptions import ProbeError

X86_CPUINFO = """processor\t: 0
vendor_id\t: GenuineIntel
cpu family\t: 6
model\t\t: 140
model name\t: 11th Gen Intel(R) Core(TM) i7-1185G7 @ 3.00GHz
cpu MHz\t\t: 2995.198

processor\t: 1
vendor_id\t: GenuineIntel
model name\t: 11th Gen Intel(R) Core(TM) i7-1185G7 @ 3.00GHz
cpu MHz\t\t: 1200.000
"""

ARM_CPUINFO = """processor\t: 0
BogoMIPS\t: 108.00
CPU implementer\t: 0x41
CPU architecture: 8
CPU part\t: 0xd08

processor\t: 1
CPU implementer\t: 0x41

Hardware\t: BCM2835
Model\t\t: Raspberry Pi 4 Model B Rev 1.4
"""

MEMINFO = """MemTotal:       16318464 kB
MemFree:         1234567 kB
MemAvailable:    8159232 kB
Buffers:          123456 kB
"""

OS_RELEASE = """NAME="Ubuntu"
VERSION="22.04.4 LTS (Jammy Jellyfish)"
ID=ubuntu
VERSION_ID="22.04"
PRETTY_NAME="Ubuntu 22.04.4 LTS"
"""

LSPCI_OUTPUT = """00:00.0 Host bridge: Intel Corporation 11th Gen Core Processor Host Bridge/DRAM Registers (rev 01)
00:02.0 VGA compatible controller: Intel Corporation TigerLake-LP GT2 [Iris Xe Graphics] (rev 01)
01:00.0 3D controller: NVIDIA Corporation GA107M [GeForce RTX 3050 Mobile] (rev a1)
02:00.0 Network controller: Intel Corporation Wi-Fi 6 AX201 (rev 20)
"""

FreqTuple = namedtuple('scpufreq', ['current', 'min', 'max'])
MemTuple = namedtuple('svmem', ['total', 'available'])


@pytest.fixture
def probe(tmp_path):
    linux_probe = LinuxProbe()
    linux_probe.cpuinfo_path = str(tmp_path / 'cpuinfo')
    linux_probe.meminfo_path = str(tmp_path / 'meminfo')
    linux_probe.cpufreq_dir = str(tmp_path / 'cpufreq')
    linux_probe.os_release_paths = (str(tmp_path / 'os-release'),)
    return linux_probe


def _write(tmp_path, name, content):
    path = tmp_path / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)


class TestLinuxCpu:
    def test_x86_vendor_and_model(self, probe, tmp_path):
        _write(tmp_path, 'cpuinfo', X86_CPUINFO)

        assert probe.cpu_vendor() == 'GenuineIntel'
        assert probe.cpu_model() == '11th Gen Intel(R) Core(TM) i7-1185G7 @ 3.00GHz'

    def test_arm_implementer_and_board_model(self, probe, tmp_path):
        _write(tmp_path, 'cpuinfo', ARM_CPUINFO)

        assert probe.cpu_vendor() == 'ARM'
        assert probe.cpu_model() == 'Raspberry Pi 4 Model B Rev 1.4'

    def test_missing_cpuinfo_is_capability_absent(self, probe):
        assert probe.cpu_vendor() is None
        assert probe.cpu_model() is None

    def test_base_frequency_from_cpufreq(self, probe, tmp_path):
        _write(tmp_path, 'cpufreq/base_frequency', '3000000\n')
        _write(tmp_path, 'cpufreq/cpuinfo_max_freq', '4800000\n')

        assert probe.cpu_frequency() == Measurement('3000000', 'kHz')

    def test_frequency_falls_back_to_psutil(self, probe):
        with patch.object(psutil, 'cpu_freq', return_value=FreqTuple(1800.0, 400.0, 4800.0)):
            assert probe.cpu_frequency() == Measurement(4800.0, 'MHz')

    def test_frequency_falls_back_to_cpuinfo(self, probe, tmp_path):
        _write(tmp_path, 'cpuinfo', X86_CPUINFO)

        with patch.object(psutil, 'cpu_freq', return_value=None):
            assert probe.cpu_frequency() == Measurement('2995.198', 'MHz')

    def test_psutil_error_becomes_probe_error(self, probe):
        with patch.object(psutil, 'cpu_count', side_effect=PermissionError("denied")):
            with pytest.raises(ProbeError):
                probe.cpu_physical_cores()


class TestLinuxRam:
    def test_meminfo(self, probe, tmp_path):
        _write(tmp_path, 'meminfo', MEMINFO)

        assert probe.ram_total() == Measurement('16318464', 'kB')
        assert probe.ram_available() == Measurement('8159232', 'kB')

    def test_meminfo_through_collector(self, probe, tmp_path, logger):
        _write(tmp_path, 'meminfo', MEMINFO)

        ram = RamCollector(probe, logger).collect()

        assert ram.total_bytes == 16318464 * 1024
        assert ram.available_bytes == 8159232 * 1024

    def test_missing_mem_available_falls_back_to_psutil(self, probe, tmp_path):
        _write(tmp_path, 'meminfo', "MemTotal:       16318464 kB\n")

        with patch.object(psutil, 'virtual_memory', return_value=MemTuple(16709984256, 4000000000)):
            assert probe.ram_available() == Measurement(4000000000, 'B')

    def test_empty_line_is_probe_error(self, probe, tmp_path):
        _write(tmp_path, 'meminfo', "MemTotal:\n")

        with pytest.raises(ProbeError):
            probe.ram_total()


class TestLinuxGpu:
    @staticmethod
    def _which(*available):
        return lambda name: f"/usr/bin/{name}" if name in available else None

    def test_lspci_display_controllers(self, probe):
        with patch('sysinfo_lite.collectors.platform.linux.shutil.which', self._which('lspci')), \
                patch.object(probe, '_execute_command', return_value=LSPCI_OUTPUT):
            adapters = probe.gpu_adapters()

        assert adapters == [
            {'vendor': 'Intel Corporation', 'model': 'Iris Xe Graphics'},
            {'vendor': 'NVIDIA Corporation', 'model': 'GeForce RTX 3050 Mobile'},
        ]

    def test_nvidia_smi_preferred(self, probe):
        outputs = {NVIDIA_SMI_QUERY: "NVIDIA GeForce RTX 3090, 24576\nNVIDIA GeForce RTX 3090, 24576"}

        with patch('sysinfo_lite.collectors.platform.linux.shutil.which', self._which('nvidia-smi', 'lspci')), \
                patch.object(probe, '_execute_command', side_effect=outputs.__getitem__):
            adapters = probe.gpu_adapters()

        assert len(adapters) == 2
        assert adapters[0] == {
            'vendor': 'NVIDIA',
            'model': 'NVIDIA GeForce RTX 3090',
            'memory': Measurement('24576', 'MiB'),
        }

    def test_nvidia_smi_failure_falls_back_to_lspci(self, probe):
        def execute(command):
            if command == NVIDIA_SMI_QUERY:
                raise ProbeError("NVIDIA-SMI has failed")
            return LSPCI_OUTPUT

        with patch('sysinfo_lite.collectors.platform.linux.shutil.which', self._which('nvidia-smi', 'lspci')), \
                patch.object(probe, '_execute_command', side_effect=execute):
            adapters = probe.gpu_adapters()

        assert [adapter['model'] for adapter in adapters] == ['Iris Xe Graphics', 'GeForce RTX 3050 Mobile']

    def test_no_tool_means_no_adapter(self, probe, logger):
        with patch('sysinfo_lite.collectors.platform.linux.shutil.which', self._which()):
            assert probe.gpu_adapters() == []
            assert GpuCollector(probe, logger).collect() == ()

    def test_headless_machine(self, probe):
        with patch('sysinfo_lite.collectors.platform.linux.shutil.which', self._which('lspci')), \
                patch.object(probe, '_execute_command', return_value="00:00.0 Host bridge: Intel Corporation 440FX"):
            assert probe.gpu_adapters() == []


class TestParseLspciDescription:
    def test_amd(self):
        parsed = parse_lspci_description(
            "Advanced Micro Devices, Inc. [AMD/ATI] Navi 21 [Radeon RX 6800/6800 XT / 6900 XT] (rev c1)"
        )
        assert parsed == {
            'vendor': 'Advanced Micro Devices, Inc. [AMD/ATI]',
            'model': 'Radeon RX 6800/6800 XT / 6900 XT',
        }

    def test_without_brackets(self):
        assert parse_lspci_description("Intel Corporation UHD Graphics 620 (rev 07)") == {
            'vendor': 'Intel Corporation',
            'model': 'UHD Graphics 620',
        }

    def test_unknown_vendor(self):
        assert parse_lspci_description("Foo Graphics Inc. Bar 3000") == {
            'vendor': None,
            'model': 'Foo Graphics Inc. Bar 3000',
        }


class TestLinuxOs:
    def test_os_release(self, probe, tmp_path):
        _write(tmp_path, 'os-release', OS_RELEASE)

        assert probe.os_name() == 'Ubuntu 22.04.4 LTS'
        assert probe.os_version() == '22.04'

    def test_missing_os_release(self, probe):
        with patch('platform.release', return_value='6.10.2-arch1-1'):
            assert probe.os_name() is None
            assert probe.os_version() == '6.10.2-arch1-1'

    def test_version_fallback(self, probe, tmp_path):
        _write(tmp_path, 'os-release', 'NAME="Arch Linux"\nVERSION="rolling"\n')

        assert probe.os_name() == 'Arch Linux'
        assert probe.os_version() == 'rolling'

    def test_rolling_release_uses_build_id(self, probe, tmp_path):
        _write(tmp_path, 'os-release', 'NAME="Arch Linux"\nPRETTY_NAME="Arch Linux"\nID=arch\nBUILD_ID=rolling\n')

        assert probe.os_version() == 'rolling'

    def test_no_version_falls_back_to_kernel(self, probe, tmp_path):
        _write(tmp_path, 'os-release', 'NAME="Gentoo"\nID=gentoo\n')

        with patch('platform.release', return_value='6.6.30-gentoo'):
            assert probe.os_version() == '6.6.30-gentoo'
