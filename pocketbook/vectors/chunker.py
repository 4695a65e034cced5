"""Split text into chunks small enough to embed."""
import re

STRATEGIES = ("paragraph", "sentence", "fixed")


class TextChunker:
    def __init__(self, max_chunk_size=500, overlap=50, strategy="paragraph", base_metadata=None):
        if strategy not in STRATEGIES:
            raise ValueError(f"unknown chunking strategy {strategy!r}")
        if overlap >= max_chunk_size:
            raise ValueError("overlap must be smaller than max_chunk_size")
        self.max_chunk_size = max_chunk_size
        self.overlap = overlap
        self.strategy = strategy
        self.base_metadata = dict(base_metadata or {})

    def chunk(self, text):
        """Return ``[{"content": str, "metadata": dict}, ...]``."""
        normalized = self._normalize(text)
        if self.strategy == "sentence":
            raw = self._merge_and_split(re.split(r"(?<=[.!?])\s+", normalized))
        elif self.strategy == "fixed":
            raw = self._fixed(normalized)
        else:
            raw = self._merge_and_split(re.split(r"\n\n+", normalized))

        chunks, position = [], 0
        for index, content in enumerate(raw):
            # fixed-size pieces may begin inside the previous chunk's tail
            start = normalized.find(content, max(0, position - self.overlap))
            if start == -1:
                start = position
            end = start + len(content)
            position = max(position, end)
            chunks.append({
                "content": content,
                "metadata": {
                    **self.base_metadata,
                    "chunk_index": index,
                    "total_chunks": len(raw),
                    "start_char": start,
                    "end_char": end,
                },
            })
        return chunks

    @staticmethod
    def _normalize(text):
        text = (text or "").replace("\r\n", "\n").replace("\t", " ")
        return re.sub(r" +", " ", text).strip()

    def _fixed(self, text):
        chunks, start = [], 0
        while start < len(text):
            end = min(start + self.max_chunk_size, len(text))
            piece = text[start:end]
            # break on a word boundary unless that throws away over half
            if end < len(text):
                last_space = piece.rfind(" ")
                if last_space > self.max_chunk_size * 0.5:
                    piece = piece[:last_space]
            if piece.strip():
                chunks.append(piece.strip())
            if start + len(piece) >= len(text):
                break
            start = max(start + len(piece) - self.overlap, start + 1)
        return chunks

    def _merge_and_split(self, segments):
        chunks, current = [], ""
        for segment in segments:
            segment = segment.strip()
            if not segment:
                continue
            if len(segment) > self.max_chunk_size:
                if current:
                    chunks.append(current)
                    current = ""
                chunks.extend(self._fixed(segment))
                continue
            candidate = f"{current}\n\n{segment}" if current else segment
            if len(candidate) <= self.max_chunk_size:
                current = candidate
            else:
                if current:
                    chunks.append(current)
                current = segment
        if current:
            chunks.append(current)
        return chunks


def chunk_text(text, **config):
    return TextChunker(**config).chunk(text)
