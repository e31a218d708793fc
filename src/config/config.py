import os

VERSION = "0.1.0"


class Config:
    """
    Configuration class for environment variables and default settings.
    """

    PROBE_PATH = os.environ.get("PROBE_PATH", "/probe")

    # JSON object mapping module name -> module definition; built-in modules if unset
    PROBE_MODULES_FILE = os.environ.get("PROBE_MODULES_FILE")

    # Applied to the outbound client; the probe itself never retries
    PROBE_TIMEOUT_SECONDS = float(os.environ.get("PROBE_TIMEOUT_SECONDS", "10"))

    # Provenance labels attached to every rendered metric.
    # Origin falls back to the colo suffix of the cf-ray header when unset.
    PROBE_ORIGIN = os.environ.get("PROBE_ORIGIN")
    CALLER_COUNTRY_HEADER = os.environ.get("CALLER_COUNTRY_HEADER", "cf-ipcountry")
    CALLER_NETWORK_HEADER = os.environ.get("CALLER_NETWORK_HEADER")
