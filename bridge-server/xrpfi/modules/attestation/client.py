"""Flare Data Connector client: verifier request, on-chain submission, DA layer proof."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

import httpx
from web3 import Web3

from xrpfi.core.config import AttestationSettings
from xrpfi.modules.chain import FDC_HUB_ABI, FLARE_SYSTEMS_MANAGER_ABI, ChainClient

from .exceptions import (
    AttestationServiceError,
    AttestationUnavailableError,
    ProofTimeoutError,
)
from .models import PaymentProof, to_bytes32_hex

logger = logging.getLogger(__name__)

NOT_FOUND_MARKERS = ("DOES NOT EXIST", "NOT_FOUND", "NOT FOUND")


class AttestationClient:
    def __init__(
        self,
        settings: AttestationSettings,
        chain: ChainClient,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._settings = settings
        self._chain = chain
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=settings.http_timeout)

    @property
    def _headers(self) -> dict[str, str]:
        return {"Content-Type": "application/json", "X-API-KEY": self._settings.api_key}

    async def request_attestation(self, source_tx_hash: str) -> str:
        """Ask the verifier to prepare an ABI-encoded Payment request for ``source_tx_hash``."""
        settings = self._settings
        url = (
            f"{settings.verifier_url.rstrip('/')}/verifier/xrp/"
            f"{settings.attestation_type}/prepareRequest"
        )
        payload = {
            "attestationType": to_bytes32_hex(settings.attestation_type),
            "sourceId": to_bytes32_hex(settings.source_id),
            "requestBody": {
                "transactionId": _prefixed(source_tx_hash),
                "inUtxo": "0",
                "utxo": "0",
            },
        }

        await asyncio.sleep(settings.propagation_delay)
        retries_left = settings.max_not_found_retries
        while True:
            result = await self._post_verifier(url, payload)
            encoded = _extract_encoded_request(result)
            if encoded:
                logger.info("Verifier prepared attestation request for %s", source_tx_hash)
                return encoded

            status = str(result.get("status", ""))
            if not _is_not_found(status):
                raise AttestationUnavailableError(
                    f"Verifier returned no request for {source_tx_hash}: status={status or 'unknown'}"
                )
            if retries_left <= 0:
                raise AttestationUnavailableError(
                    f"Payment {source_tx_hash} still unknown to the verifier after "
                    f"{settings.max_not_found_retries} retries"
                )
            logger.info(
                "Payment %s not yet visible to verifier, retrying in %.0fs (%d retries left)",
                source_tx_hash,
                settings.not_found_retry_delay,
                retries_left,
            )
            retries_left -= 1
            await asyncio.sleep(settings.not_found_retry_delay)

    async def submit_attestation_request(self, request_bytes: str) -> int:
        """Submit the request to FdcHub and return the round in which its proof lands."""
        fdc_hub = await self._chain.get_contract_address("FdcHub")
        systems_manager = await self._chain.get_contract_address("FlareSystemsManager")
        current_round = await self._chain.read(systems_manager, FLARE_SYSTEMS_MANAGER_ABI, "getCurrentVotingEpochId")
        logger.info("Submitting attestation request to FdcHub %s (current round %s)", fdc_hub, current_round)

        sent = await self._chain.send(
            fdc_hub,
            FDC_HUB_ABI,
            "requestAttestation",
            Web3.to_bytes(hexstr=_prefixed(request_bytes)),
            value=self._settings.request_fee_wei,
        )
        logger.info("Attestation request confirmed: %s", sent.tx_hash)
        return int(current_round) + 1

    async def wait_for_proof(
        self,
        request_bytes: str,
        voting_round_id: int,
        max_wait: Optional[float] = None,
    ) -> PaymentProof:
        max_wait = self._settings.proof_max_wait if max_wait is None else max_wait
        try:
            return await asyncio.wait_for(self._poll_for_proof(request_bytes, voting_round_id), timeout=max_wait)
        except asyncio.TimeoutError as exc:
            raise ProofTimeoutError(voting_round_id, max_wait) from exc

    async def get_payment_proof(self, source_tx_hash: str) -> PaymentProof:
        request_bytes = await self.request_attestation(source_tx_hash)
        voting_round_id = await self.submit_attestation_request(request_bytes)
        return await self.wait_for_proof(request_bytes, voting_round_id)

    async def close(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def _poll_for_proof(self, request_bytes: str, voting_round_id: int) -> PaymentProof:
        settings = self._settings
        logger.info("Waiting for proof starting at round %d", voting_round_id)
        await asyncio.sleep(settings.proof_initial_wait)

        while True:
            for offset in range(settings.proof_round_window):
                round_id = voting_round_id + offset
                proof = await self._fetch_proof(request_bytes, round_id)
                if proof is not None:
                    logger.info("Proof found in round %d", round_id)
                    return proof
                await asyncio.sleep(settings.proof_round_delay)
            logger.debug(
                "Proof not yet available for rounds %d..%d",
                voting_round_id,
                voting_round_id + settings.proof_round_window - 1,
            )
            await asyncio.sleep(settings.proof_poll_interval)

    async def _fetch_proof(self, request_bytes: str, round_id: int) -> Optional[PaymentProof]:
        url = f"{self._settings.da_layer_url.rstrip('/')}/api/v1/fdc/proof-by-request-round-raw"
        try:
            response = await self._http.post(
                url,
                json={"votingRoundId": round_id, "requestBytes": _prefixed(request_bytes)},
                headers=self._headers,
            )
        except httpx.HTTPError as exc:
            logger.debug("DA layer request failed for round %d: %s", round_id, exc)
            return None

        if response.is_error:
            logger.debug("DA layer returned %d for round %d: %s", response.status_code, round_id, response.text[:100])
            return None
        try:
            body = response.json()
        except ValueError:
            logger.debug("DA layer returned a non-JSON body for round %d", round_id)
            return None

        merkle_proof = body.get("merkleProof") or body.get("proof") or []
        if not merkle_proof:
            return None
        return PaymentProof(
            voting_round_id=round_id,
            request_bytes=_prefixed(request_bytes),
            merkle_proof=list(merkle_proof),
            data=body.get("data") or body.get("response") or body.get("response_hex"),
        )

    async def _post_verifier(self, url: str, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            response = await self._http.post(url, json=payload, headers=self._headers)
        except httpx.HTTPError as exc:
            raise AttestationServiceError(f"Verifier unreachable: {exc}") from exc

        if response.is_error:
            raise AttestationServiceError(
                f"Verifier error {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise AttestationServiceError("Verifier returned a non-JSON body", response.status_code) from exc


def _prefixed(value: str) -> str:
    return value if value[:2].lower() == "0x" else f"0x{value}"


def _extract_encoded_request(result: dict[str, Any]) -> Optional[str]:
    nested = result.get("response") if isinstance(result.get("response"), dict) else {}
    return result.get("abiEncodedRequest") or result.get("abiEncodedResponse") or nested.get("abiEncodedRequest")


def _is_not_found(status: str) -> bool:
    upper = status.upper()
    return any(marker in upper for marker in NOT_FOUND_MARKERS)


__all__ = ["AttestationClient"]
