"""
Assistant Client - Optional LLM classification of extracted line items

Sends only name, component, vendor, cost and markup per item to an
Ollama-style /api/generate endpoint and validates the reply.
"""
import json
import logging
import re
from typing import Any, Dict, List, Optional

import requests
from json_repair import repair_json
from pydantic import BaseModel, Field, ValidationError

from ..exceptions import AssistantError
from ..models.extraction_models import ExtractedLineItem, ItemCategory
from ..shared_utils.config_manager import AssistantSettings

logger = logging.getLogger(__name__)


class AssistantItem(BaseModel):
    """One entry of the assistant's reply, aligned by position with the request."""
    category: ItemCategory
    normalizedName: str = Field(..., min_length=1)
    confidence: float = Field(..., ge=0.0, le=1.0)


class AssistantResponse(BaseModel):
    items: List[AssistantItem]


def build_request_items(items: List[ExtractedLineItem]) -> List[Dict[str, Any]]:
    """The only item fields the assistant ever sees."""
    return [
        {
            'name': item.name,
            'component': item.component.value,
            'vendor': item.vendor_name,
            'cost': item.cost,
            'markup': item.markup_pct
        }
        for item in items
    ]


class AssistantClient:
    """
    Classification assistant client.

    Connects to an Ollama-compatible server (default http://localhost:11434).
    Every failure is raised as AssistantError.
    """

    def __init__(self, settings: Optional[AssistantSettings] = None):
        self.settings = settings or AssistantSettings()
        self.base_url = self.settings.url.rstrip('/')
        self.model = self.settings.model
        self.timeout = self.settings.timeout

    def _build_prompt(self, request_items: List[Dict[str, Any]]) -> str:
        categories = ", ".join(c.value for c in ItemCategory)
        return f"""You classify construction estimate line items.

For each item in <items>, return its category, a clean display name and your confidence.

<items>
{json.dumps(request_items, indent=2)}
</items>

RULES:
1. category must be one of: {categories}.
2. normalizedName is a short, clean version of the item name. Do not invent scope.
3. confidence is a number between 0 and 1.
4. Return exactly {len(request_items)} entries, in the same order as <items>.
5. Do not return costs, prices or markups.

FORMAT: Output VALID JSON ONLY, shaped as
{{"items": [{{"category": "...", "normalizedName": "...", "confidence": 0.9}}]}}
"""

    def _generate(self, prompt: str) -> str:
        try:
            response = requests.post(
                f"{self.base_url}{self.settings.endpoint}",
                json={
                    "model": self.model,
                    "prompt": prompt,
                    "stream": False,
                    "options": {
                        "temperature": 0
                    }
                },
                timeout=self.timeout
            )
            response.raise_for_status()
            body = response.json()
        except requests.Timeout as e:
            raise AssistantError(f"Assistant request timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            raise AssistantError(f"Assistant request failed: {e}") from e
        except ValueError as e:
            raise AssistantError(f"Assistant returned a non-JSON body: {e}") from e

        if not isinstance(body, dict):
            raise AssistantError(f"Assistant body is a {type(body).__name__}, expected an object")
        text = body.get('response', '')
        if not isinstance(text, str):
            raise AssistantError(f"Assistant 'response' is a {type(text).__name__}, expected text")
        return text

    def _parse_response(self, llm_response: str) -> Any:
        """Pull the JSON object out of the model output, repairing it if needed."""
        text = re.sub(r'```(?:json)?', '', llm_response or '')
        starts = [i for i in (text.find('{'), text.find('[')) if i != -1]
        end = max(text.rfind('}'), text.rfind(']'))
        if not starts or end < min(starts):
            raise AssistantError("Assistant response contained no JSON")
        try:
            return repair_json(text[min(starts):end + 1], return_objects=True)
        except Exception as e:
            raise AssistantError(f"Assistant response could not be repaired: {e}") from e

    def classify(self, items: List[ExtractedLineItem]) -> List[AssistantItem]:
        """
        Classify items in one request.

        Returns:
            One AssistantItem per input item, in input order

        Raises:
            AssistantError: transport failure, malformed reply or length mismatch
        """
        request_items = build_request_items(items)
        logger.info(f"Requesting assistant classification for {len(request_items)} items ({self.model})")

        data = self._parse_response(self._generate(self._build_prompt(request_items)))
        if isinstance(data, list):
            data = {'items': data}
        try:
            parsed = AssistantResponse.model_validate(data)
        except ValidationError as e:
            raise AssistantError(f"Assistant response failed validation: {e.error_count()} errors") from e

        if len(parsed.items) != len(items):
            raise AssistantError(
                f"Assistant returned {len(parsed.items)} entries for {len(items)} items"
            )
        return parsed.items
