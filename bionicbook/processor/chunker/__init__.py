from bionicbook.processor.chunker.chunker import TextChunker, split_sentences, split_text
from bionicbook.processor.chunker.models import Chunk, ChunkSnapshot, ChunkStatus, build_chunks

__all__ = [
    "TextChunker",
    "split_sentences",
    "split_text",
    "Chunk",
    "ChunkSnapshot",
    "ChunkStatus",
    "build_chunks",
]
