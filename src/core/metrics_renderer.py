from prometheus_client import CollectorRegistry, generate_latest
from prometheus_client.core import GaugeMetricFamily
from prometheus_client.registry import Collector

from contracts.probe_outcome import ProbeOutcome

# (name, help, outcome field); order is part of the output format
PROBE_METRICS = (
    ("probe_success", "Displays whether or not the probe was a success", "success"),
    ("probe_duration_seconds", "Returns how long the probe took to complete in seconds", "duration_seconds"),
    ("probe_http_status_code", "Response HTTP status code", "http_status_code"),
    ("probe_http_redirected", "Indicates whether the request was redirected", "redirected"),
    ("probe_http_content_length", "Length of http content response", "content_length"),
)


class ProbeOutcomeCollector(Collector):
    """
    Exposes one probe outcome as gauges, with the outcome's labels on every sample.
    """

    def __init__(self, outcome: ProbeOutcome):
        self.outcome = outcome

    def collect(self):
        label_names = list(self.outcome.labels)
        label_values = [self.outcome.labels[name] for name in label_names]
        for name, documentation, field in PROBE_METRICS:
            value = float(getattr(self.outcome, field))
            if label_names:
                family = GaugeMetricFamily(name, documentation, labels=label_names)
                family.add_metric(label_values, value)
            else:
                family = GaugeMetricFamily(name, documentation, value=value)
            yield family


def render_metrics(outcome: ProbeOutcome) -> bytes:
    """
    Render a probe outcome in the Prometheus text exposition format.
    """
    registry = CollectorRegistry()
    registry.register(ProbeOutcomeCollector(outcome))
    return generate_latest(registry)
