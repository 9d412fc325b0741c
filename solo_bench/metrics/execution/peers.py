from __future__ import annotations

import logging
from typing import Mapping

import requests

from ...metric import Group, ProbeError
from ..http import describe_error_response
from ..peers import PeerCountMetric

LOGGER = logging.getLogger("solo_bench.metrics.execution")

PEER_COUNT_MEASUREMENT = "Count"
UNABLE_TO_MEASURE = "UNABLE_TO_MEASURE"

_PEER_COUNT_REQUEST = {"jsonrpc": "2.0", "method": "net_peerCount", "params": [], "id": 1}


class ExecutionPeerMetric(PeerCountMetric):
    """Peer count from the execution client's ``net_peerCount`` JSON-RPC method."""

    group = Group.EXECUTION
    measurement = PEER_COUNT_MEASUREMENT

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.measuring_errors: dict[str, str] = {}

    def probe(self) -> Mapping[str, int]:
        try:
            response = self.session.post(
                self.url, json=_PEER_COUNT_REQUEST, timeout=self.probe_timeout
            )
        except requests.RequestException as exc:
            raise ProbeError(exc) from exc

        with response:
            if response.status_code != 200:
                raise ProbeError(describe_error_response(response))
            try:
                result = response.json().get("result") or ""
            except (ValueError, AttributeError) as exc:
                raise ProbeError(f"unexpected net_peerCount response: {exc}") from exc

        if not result:
            message = (
                "peer count RPC response was empty. "
                "Most likely net_peerCount RPC method is not supported"
            )
            self.measuring_errors[PEER_COUNT_MEASUREMENT] = f"{UNABLE_TO_MEASURE}: {message}"
            raise ProbeError(message)

        try:
            peer_count = int(result, 16)
        except (TypeError, ValueError) as exc:
            raise ProbeError(f"peer count {result!r} is not a hex number") from exc

        return self._record(peer_count)

    def aggregate_results(self) -> str:
        for measurement, err in self.measuring_errors.items():
            LOGGER.warning("error measuring metric %s (%s): %s", self.name, measurement, err)
            return err
        return super().aggregate_results()
