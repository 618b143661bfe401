from course_chat.llm.chat_completion import ChatCompletionClient

__all__ = ["ChatCompletionClient"]
