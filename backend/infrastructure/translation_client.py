"""
Client for the remote translation producer (the ull-translate function).

The producer is opaque: it receives either legacy text items or meaning object
ids plus a target locale, and answers {"translations": {key: text}}. Any
failure is reported as "no translation available" (an empty mapping); callers
keep showing the original text.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Protocol, Sequence

import httpx

logger = logging.getLogger("TranslationClient")


@dataclass(frozen=True)
class TranslateItem:
    """One legacy text item to translate."""

    table: str
    id: str
    field: str
    text: str
    source_lang: str

    @property
    def composite_key(self) -> str:
        """Key the producer uses for this item in its response."""
        return f"{self.table}:{self.id}:{self.field}"

    def to_payload(self) -> dict:
        return {
            "table": self.table,
            "id": self.id,
            "field": self.field,
            "text": self.text,
            "source_lang": self.source_lang,
        }


class TranslationProducer(Protocol):
    """Remote producer of locale strings."""

    async def translate_items(self, items: Sequence[TranslateItem], target_lang: str) -> Dict[str, str]: ...

    async def translate_meanings(self, meaning_object_ids: Sequence[str], target_lang: str) -> Dict[str, str]: ...


class NullTranslationProducer:
    """Producer used when no translation service is configured: nothing ever arrives."""

    async def translate_items(self, items: Sequence[TranslateItem], target_lang: str) -> Dict[str, str]:
        return {}

    async def translate_meanings(self, meaning_object_ids: Sequence[str], target_lang: str) -> Dict[str, str]:
        return {}

    async def aclose(self) -> None:
        return None


class HttpTranslationProducer:
    """TranslationProducer talking JSON over HTTP."""

    def __init__(
        self,
        url: str,
        api_key: Optional[str] = None,
        timeout: float = 15.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.url = url
        self._api_key = api_key
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = client is None

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    async def _post(self, body: dict) -> Dict[str, str]:
        try:
            response = await self._client.post(self.url, json=body, headers=self._headers())
        except httpx.HTTPError as e:
            logger.warning(f"Translation request failed: {e}")
            return {}

        if response.status_code == 429:
            logger.warning("Translation producer rate limit exceeded")
            return {}
        if response.status_code == 402:
            logger.warning("Translation producer credits exhausted")
            return {}
        if response.is_error:
            logger.warning(f"Translation producer returned HTTP {response.status_code}")
            return {}

        try:
            translations = response.json().get("translations")
        except (ValueError, AttributeError) as e:
            logger.warning(f"Malformed translation response: {e}")
            return {}

        if not isinstance(translations, dict):
            logger.warning("Translation response has no translations mapping")
            return {}

        return {str(k): v for k, v in translations.items() if isinstance(v, str) and v}

    async def translate_items(self, items: Sequence[TranslateItem], target_lang: str) -> Dict[str, str]:
        """
        Translate legacy text items.

        Returns:
            Mapping of "table:id:field" to translated text (missing keys = no translation)
        """
        if not items:
            return {}
        return await self._post({"items": [item.to_payload() for item in items], "target_lang": target_lang})

    async def translate_meanings(self, meaning_object_ids: Sequence[str], target_lang: str) -> Dict[str, str]:
        """
        Project meaning objects into a locale.

        Returns:
            Mapping of meaning object id to rendered text
        """
        if not meaning_object_ids:
            return {}
        return await self._post({"meaning_object_ids": list(meaning_object_ids), "target_lang": target_lang})
