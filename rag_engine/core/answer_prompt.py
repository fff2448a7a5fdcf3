"""
Answer synthesis prompt.

Builds the bounded context block from search results and the chat
messages sent to the text-generation service.

Dependencies: langchain_core.prompts
System role: Prompt template for context-grounded answers
"""

from langchain_core.prompts import ChatPromptTemplate

from rag_engine.models.generation import ChatMessage
from rag_engine.models.search import SearchResult

NO_RESULTS_ANSWER = (
    "I couldn't find any relevant information in the indexed documents to answer this question."
)

SYSTEM_PROMPT = """You are a helpful assistant that answers questions using the documents provided in the context.

## Instructions
1. Use ONLY the information in the provided documents to answer
2. If the documents do not contain the answer, say clearly that the information is not in the documents
3. Do not use outside knowledge or make up facts
4. Mention the source of the information you use
5. Be concise but thorough{style}{language}"""

ANSWER_PROMPT = ChatPromptTemplate.from_messages([
    ("system", SYSTEM_PROMPT),
    ("human", """Context:
{context}

Question: {question}"""),
])

_ROLES = {"system": "system", "human": "user", "ai": "assistant"}


def format_source(result: SearchResult) -> str:
    metadata = result.document.metadata
    label = metadata.title or metadata.source
    if metadata.page is not None:
        label = f"{label} (page {metadata.page})"
    return label


def build_context(results: list[SearchResult], max_chars: int) -> str:
    """
    Join results into 'Source/Content' blocks, best first, within max_chars.

    The first block is always included, truncated when it alone exceeds the bound.
    """
    blocks: list[str] = []
    used = 0
    separator = "\n\n---\n\n"
    for result in results:
        block = f"Source: {format_source(result)}\nContent: {result.document.content}"
        cost = len(block) + (len(separator) if blocks else 0)
        if blocks and used + cost > max_chars:
            break
        if not blocks and cost > max_chars:
            block = block[:max_chars]
            cost = len(block)
        blocks.append(block)
        used += cost
    return separator.join(blocks)


def build_messages(
    question: str,
    context: str,
    style: str | None = None,
    language: str | None = None,
) -> list[ChatMessage]:
    """Render the answer prompt into role/content messages."""
    prompt_messages = ANSWER_PROMPT.format_messages(
        context=context,
        question=question,
        style=f"\n6. Answer style: {style}" if style else "",
        language=f"\nWrite the answer in {language}." if language else "",
    )
    return [
        ChatMessage(role=_ROLES.get(message.type, "user"), content=message.content)
        for message in prompt_messages
    ]


def generation_failed_answer(result_count: int, error: str) -> str:
    return (
        f"Found {result_count} relevant document(s), but the answer could not be generated: {error}"
    )
