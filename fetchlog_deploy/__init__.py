"""FetchLog deployment orchestrator — provision and manage the fetchlog systemd service."""

__version__ = "0.1.0"
