from __future__ import annotations

from typing import Mapping

import requests

from ...metric import Group, ProbeError
from ..http import describe_error_response
from ..peers import PeerCountMetric

PEER_COUNT_MEASUREMENT = "PeerCount"


class ConsensusPeerMetric(PeerCountMetric):
    """Connected peers reported by the beacon node API."""

    group = Group.CONSENSUS
    measurement = PEER_COUNT_MEASUREMENT

    def probe(self) -> Mapping[str, int]:
        try:
            response = self.session.get(
                f"{self.url}/eth/v1/node/peer_count", timeout=self.probe_timeout
            )
        except requests.RequestException as exc:
            raise ProbeError(exc) from exc

        with response:
            if response.status_code != 200:
                raise ProbeError(describe_error_response(response))
            try:
                connected = response.json()["data"]["connected"]
                peer_count = int(connected)
            except (ValueError, KeyError, TypeError) as exc:
                raise ProbeError(f"unexpected peer_count response: {exc}") from exc

        return self._record(peer_count)
