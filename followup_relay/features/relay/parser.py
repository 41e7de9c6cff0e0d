"""Push payload parsing"""
import json
import logging
from typing import Optional, Union

from pydantic import ValidationError

from followup_relay.features.relay.domain import NotificationRequest
from followup_relay.features.relay.exceptions import MalformedPushPayloadError

logger = logging.getLogger(__name__)


class PushPayloadParser:
    """Decodes raw push messages into notification requests."""

    def parse(self, raw: Optional[Union[bytes, str]]) -> Optional[NotificationRequest]:
        """
        Decode a push payload.

        Args:
            raw: Payload bytes/text from the push channel, or None when the
                push carried no data

        Returns:
            NotificationRequest with defaults applied, or None for an
            absent payload

        Raises:
            MalformedPushPayloadError: If the payload isn't a JSON object
                with the expected structure
        """
        if raw is None:
            return None
        if isinstance(raw, bytes):
            try:
                raw = raw.decode("utf-8")
            except UnicodeDecodeError as e:
                raise MalformedPushPayloadError(f"Push payload is not UTF-8: {e}") from e
        if not raw.strip():
            return None

        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError as e:
            raise MalformedPushPayloadError(f"Push payload is not valid JSON: {e}") from e

        if not isinstance(decoded, dict):
            raise MalformedPushPayloadError(
                f"Push payload must be a JSON object, got {type(decoded).__name__}"
            )

        try:
            request = NotificationRequest.model_validate(decoded)
        except ValidationError as e:
            raise MalformedPushPayloadError(f"Push payload has unexpected structure: {e}") from e

        logger.debug(f"Parsed push payload: tag={request.tag}, actions={len(request.actions)}")
        return request
