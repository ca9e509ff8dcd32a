"""
Keyword-overlap chunk retrieval.

Finds chunks whose text mentions words from the student's message and
turns them into a context block for the tutor prompt plus page
citations. Matching is plain substring containment and first-found
wins: no ranking is applied, so the same question can surface
different pages depending on the order of the chat's documents.
"""

import logging
from typing import Iterable, List, NamedTuple

from study.models import Document


logger = logging.getLogger(__name__)

MAX_CHUNKS_PER_DOCUMENT = 3
MAX_CITATIONS = 3
CONTEXT_CHARS = 300
SNIPPET_CHARS = 150
MIN_LONG_TOKEN_LENGTH = 4


class RetrievalResult(NamedTuple):
    context_text: str
    citations: List[dict]


class ChunkRetriever:
    """
    Simple keyword-based chunk retrieval engine.

    This is the "search engine" component of the chat pipeline.
    """

    @classmethod
    def tokenize(cls, query: str) -> List[str]:
        """Lowercase the query and split it on whitespace."""
        return query.lower().split()

    @classmethod
    def is_relevant(cls, chunk_text: str, tokens: List[str]) -> bool:
        """
        Decide whether a chunk matches the query tokens.

        A chunk matches when its lowercased text contains the first
        token, the second token, or any token of four or more characters.
        """
        text = chunk_text.lower()

        if tokens and tokens[0] in text:
            return True
        if len(tokens) > 1 and tokens[1] in text:
            return True
        return any(
            len(token) >= MIN_LONG_TOKEN_LENGTH and token in text
            for token in tokens
        )

    @classmethod
    def match(cls, query: str, documents: Iterable[Document]) -> RetrievalResult:
        """
        Select relevant chunks across documents and build citations.

        Each document contributes at most its first three matching
        chunks (in chunk order). Every selected chunk is added to the
        context; only the first three citations overall are kept.

        Args:
            query: The student's message.
            documents: Documents to search, in search order.

        Returns:
            RetrievalResult(context_text, citations). Citations are dicts
            with pageNumber, snippet and documentId.
        """
        tokens = cls.tokenize(query)
        context_parts = []
        citations = []

        for document in documents:
            relevant = [
                chunk for chunk in document.chunks.all()
                if cls.is_relevant(chunk.text, tokens)
            ][:MAX_CHUNKS_PER_DOCUMENT]

            for chunk in relevant:
                context_parts.append(
                    f"Page {chunk.page_number}: {chunk.text[:CONTEXT_CHARS]}...\n\n"
                )
                citations.append({
                    "pageNumber": chunk.page_number,
                    "snippet": chunk.text[:SNIPPET_CHARS] + "...",
                    "documentId": document.pk,
                })

        logger.info(f"Retrieval matched {len(citations)} chunks for query: {query[:100]}")
        return RetrievalResult(
            context_text="".join(context_parts),
            citations=citations[:MAX_CITATIONS],
        )
