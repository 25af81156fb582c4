import google.generativeai as genai
import logging
from typing import Optional
from placement_coach.config import get_settings
from placement_coach.exceptions import AICollaboratorError
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type
)

settings = get_settings()

class GeminiServices:
    """Gemini API service"""

    def __init__(self, api_key: Optional[str] = None):
        genai.configure(api_key=api_key or settings.gemini_api_key)
        self.model = genai.GenerativeModel(settings.gemini_model)

        self.generation_config = {
            "temperature": settings.gemini_temperature,
            "top_p": 0.95,
            "top_k": 40,
            "max_output_tokens": settings.gemini_max_tokens,
        }

    @retry(
        stop=stop_after_attempt(max(1, settings.gemini_max_attempts)),
        wait=wait_exponential(multiplier=2, min=1, max=10),
        retry=retry_if_exception_type(Exception),
        reraise=True
    )
    async def generate_with_retry(
        self,
        prompt: str,
        temperature: Optional[float] = None,
        json_mode: bool = False
    ) -> str:
        """Generate text; attempts are bounded by settings.gemini_max_attempts"""

        try:
            config = self.generation_config.copy()
            if temperature is not None:
                config["temperature"] = temperature

            if json_mode:
                prompt = self._add_json_instruction(prompt)

            logging.debug("Prompt: " + prompt)

            response = await self.model.generate_content_async(
                prompt,
                generation_config=config,
                request_options={"timeout": settings.gemini_timeout}
            )

            if not response.parts:
                raise AICollaboratorError("Empty response from Gemini")

            text = response.text
            logging.info(f"Gemini generated {len(text)} characters")
            return text

        except Exception as e:
            logging.error(f"Gemini API error: {str(e)}")
            raise

    def _add_json_instruction(self, prompt: str) -> str:
        """Add JSON instruction to prompt"""

        json_instruction = """
        CRITICAL: You MUST respond with ONLY valid JSON. No markdown, no explanation, no code blocks.
        Your entire response should be parseable by json.loads().
        """

        return prompt + json_instruction

# Singleton instance
_gemini_service = None

def get_gemini_service() -> Optional[GeminiServices]:
    """
    Get or create GeminiServices singleton; None when no API key is configured
    """

    global _gemini_service
    if not settings.gemini_api_key:
        return None
    if _gemini_service is None:
        _gemini_service = GeminiServices()
    return _gemini_service
