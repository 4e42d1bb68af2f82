"""Gemini Notice Analyzer Adapter

NoticeAnalyzer ABC implementation on Vertex AI Gemini.

vertexai.init() is kept out of the constructor: the caller (factory etc.)
initializes Vertex AI and passes a ready GenerativeModel.
"""

import json
import logging

import vertexai.preview.generative_models as generative_models
from vertexai.generative_models import GenerationConfig, GenerativeModel

from tutorbook.domain.errors import AnalysisError
from tutorbook.domain.models import Notice, NoticeAction, NoticeAnalysis
from tutorbook.domain.ports import NoticeAnalyzer

logger = logging.getLogger(__name__)

RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "relatedStudentName": {"type": "STRING", "nullable": True},
        "targetDate": {"type": "STRING", "nullable": True},
        "action": {
            "type": "STRING",
            "enum": [a.value for a in NoticeAction],
        },
        "reason": {"type": "STRING", "nullable": True},
    },
    "required": ["action"],
}


class GeminiNoticeAnalyzer(NoticeAnalyzer):
    """
    Extracts cancellation / reschedule intents from parent emails with Gemini.

    Expects vertexai.init() to have been called already and receives an
    initialized GenerativeModel, which keeps it easy to mock in tests.
    """

    def __init__(self, model: GenerativeModel) -> None:
        """
        Args:
            model: initialized GenerativeModel.
                   Call vertexai.init() before creating it.
        """
        if model is None:
            raise ValueError("model is required")

        self._model = model

        logger.info("GeminiNoticeAnalyzer initialized")

    def analyze(self, notice: Notice, student_names: list[str]) -> NoticeAnalysis:
        """
        Extract the intent of a notice.

        Args:
            notice: the email to analyze
            student_names: known student names, given to the model as hints

        Returns:
            NoticeAnalysis: the structured intent

        Raises:
            AnalysisError: the call failed or the response is not valid JSON
        """
        try:
            prompt = self._build_prompt(notice, student_names)

            generation_config = GenerationConfig(
                temperature=0.1,
                max_output_tokens=1024,
                response_mime_type="application/json",
                response_schema=RESPONSE_SCHEMA,
            )

            HarmCategory = generative_models.HarmCategory
            HarmBlock = generative_models.HarmBlockThreshold
            safety_settings = {
                HarmCategory.HARM_CATEGORY_HATE_SPEECH: HarmBlock.BLOCK_MEDIUM_AND_ABOVE,
                HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT: HarmBlock.BLOCK_MEDIUM_AND_ABOVE,
                HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT: HarmBlock.BLOCK_MEDIUM_AND_ABOVE,
                HarmCategory.HARM_CATEGORY_HARASSMENT: HarmBlock.BLOCK_MEDIUM_AND_ABOVE,
            }

            response = self._model.generate_content(
                prompt,
                generation_config=generation_config,
                safety_settings=safety_settings,
                stream=False,
            )

            usage = getattr(response, "usage_metadata", None)
            if usage:
                logger.info(
                    "Gemini token usage: input=%d, output=%d, total=%d",
                    usage.prompt_token_count,
                    usage.candidates_token_count,
                    usage.total_token_count,
                )

            if not response.text:
                raise AnalysisError("Empty response from Gemini")

            raw_json = self._parse_response(response.text)
            analysis = self._convert_to_domain_model(raw_json)

            logger.info(
                "Notice %s analyzed: student=%s, action=%s, date=%s",
                notice.id,
                analysis.related_student_name,
                analysis.action.value,
                analysis.target_date,
            )
            return analysis

        except AnalysisError:
            logger.exception("Failed to analyze notice %s", notice.id)
            raise
        except Exception as e:
            logger.exception("Failed to analyze notice %s", notice.id)
            raise AnalysisError(f"Gemini analysis failed: {e}") from e

    def _build_prompt(self, notice: Notice, student_names: list[str]) -> str:
        """Build the prompt (Vietnamese, the language of the notices)"""
        names_str = json.dumps(student_names, ensure_ascii=False)

        return f"""
Bạn là một trợ lý AI giúp quản lý lịch dạy học.
Hãy phân tích nội dung email dưới đây để xác định xem học sinh có xin nghỉ, xin đổi lịch hay không.

Danh sách học sinh: {names_str}

Email Subject: {notice.subject}
Email Content: {notice.snippet}
Email Date: {notice.date.isoformat()}

Trích xuất các thông tin sau dưới dạng JSON:
1. relatedStudentName: Tên học sinh được nhắc đến (nếu có), viết đúng như trong danh sách học sinh.
2. targetDate: Ngày buổi học bị ảnh hưởng (ISO string YYYY-MM-DD). Nếu email nói "hôm qua", "ngày mai", hãy tính dựa trên Email Date.
3. action: 'CANCEL' (nghỉ học), 'RESCHEDULE' (đổi lịch), 'CONFIRM' (xác nhận), hoặc 'UNKNOWN'.
4. reason: Lý do ngắn gọn (nếu có).
"""

    def _parse_response(self, response_text: str) -> dict:
        """
        Parse the Gemini response.

        Strips a Markdown code fence, then decodes JSON.
        """
        text = response_text.strip()

        if text.startswith("```json"):
            text = text[7:]
        if text.endswith("```"):
            text = text[:-3]

        text = text.strip()

        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as e:
            logger.error("Failed to parse JSON response: %s", e)
            logger.error("Raw response: %s", response_text)
            raise AnalysisError(f"Invalid JSON from Gemini: {e}") from e

        if not isinstance(parsed, dict):
            raise AnalysisError(f"Expected a JSON object, got {type(parsed).__name__}")
        return parsed

    def _convert_to_domain_model(self, raw_json: dict) -> NoticeAnalysis:
        """Convert the raw JSON dict into a NoticeAnalysis"""
        action_str = raw_json.get("action") or "UNKNOWN"
        try:
            action = NoticeAction(str(action_str).upper())
        except ValueError:
            logger.warning("Invalid action: %s, using UNKNOWN", action_str)
            action = NoticeAction.UNKNOWN

        return NoticeAnalysis(
            related_student_name=raw_json.get("relatedStudentName") or None,
            target_date=raw_json.get("targetDate") or None,
            action=action,
            reason=raw_json.get("reason") or None,
        )
