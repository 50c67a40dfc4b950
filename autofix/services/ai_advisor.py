"""
AI Advisor Client

Sends a diagnosis prompt to the Gemini generateContent endpoint and returns
the reply text unchanged.
"""

import os
import logging
import httpx
from typing import Optional, Dict, Any

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-3-flash-preview"
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
EMPTY_REPLY_TEXT = "Não foi possível gerar um diagnóstico no momento."

PROMPT_TEMPLATE = """
Você é um especialista mecânico automotivo sênior.
Veículo: {vehicle_info}
Sintomas relatados: {symptoms}

Por favor, forneça:
1. Diagnóstico provável (liste 3 possibilidades em ordem de probabilidade).
2. Peças que provavelmente precisarão ser verificadas ou trocadas.
3. Estimativa de complexidade do serviço (Baixa, Média, Alta).

Mantenha a resposta concisa, profissional e formatada para leitura rápida.
"""


def build_diagnosis_prompt(symptoms: str, vehicle_info: str) -> str:
    return PROMPT_TEMPLATE.format(
        vehicle_info=vehicle_info.strip(),
        symptoms=symptoms.strip()
    )


def extract_text(payload: Dict[str, Any]) -> str:
    """Concatenate the text parts of the first candidate"""
    candidates = payload.get("candidates") or []
    if not candidates:
        return ""
    parts = (candidates[0].get("content") or {}).get("parts") or []
    return "".join(p.get("text", "") for p in parts)


class AIAdvisorClient:
    """Client for the hosted text-generation endpoint"""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        self.api_key = api_key or os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")
        self.model = model or os.getenv("GEMINI_MODEL", DEFAULT_MODEL)
        self.base_url = os.getenv("GEMINI_BASE_URL", DEFAULT_BASE_URL)
        self.timeout = float(os.getenv("GEMINI_TIMEOUT", "30"))

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def _get_headers(self) -> Dict[str, str]:
        if not self.api_key:
            raise ValueError("AI advisor API key is missing (set GEMINI_API_KEY)")
        return {
            "x-goog-api-key": self.api_key,
            "Content-Type": "application/json"
        }

    async def generate_diagnosis(self, symptoms: str, vehicle_info: str) -> str:
        """
        Ask the model for a probable diagnosis

        Args:
            symptoms: Symptoms/noises reported by the customer
            vehicle_info: Make, model and year

        Returns:
            Reply text as-is (fallback text when the reply is empty)
        Raises:
            ValueError if no API key is configured
            httpx.HTTPError on transport or HTTP errors, or a non-JSON reply
        """
        headers = self._get_headers()
        url = f"{self.base_url}/models/{self.model}:generateContent"
        body = {
            "contents": [
                {"parts": [{"text": build_diagnosis_prompt(symptoms, vehicle_info)}]}
            ]
        }

        logger.info(f"[Advisor] Requesting diagnosis from {self.model}")
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(url, headers=headers, json=body)
            response.raise_for_status()
            try:
                payload = response.json()
            except ValueError as e:
                raise httpx.DecodingError(f"Reply is not JSON: {e}", request=response.request)
            text = extract_text(payload)

        if not text.strip():
            logger.warning("[Advisor] Empty reply from model")
            return EMPTY_REPLY_TEXT
        return text


# Singleton instance
_advisor: Optional[AIAdvisorClient] = None


def get_advisor_client() -> AIAdvisorClient:
    """Get or create AI advisor client"""
    global _advisor
    if _advisor is None:
        _advisor = AIAdvisorClient()
    return _advisor
