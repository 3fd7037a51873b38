from astro_assistant.utils.sse import extract_delta_content
from astro_assistant.utils.message_helpers import append_fragment, format_error_text

__all__ = ["append_fragment", "extract_delta_content", "format_error_text"]
