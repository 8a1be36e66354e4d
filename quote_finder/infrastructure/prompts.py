# quote_finder/infrastructure/prompts.py

OCR_NOTE = """
- IMPORTANT: This text was extracted using OCR (Optical Character Recognition) and may contain \
spelling or grammar errors. Correct any obvious spelling and grammar mistakes in the quotes \
while preserving the original meaning and intent."""


def build_system_prompt(is_ocr: bool = False) -> str:
    return f"""You are a quote analysis assistant. Your task is to:
- Find quotes that are HIGHLY SPECIFIC to the topic provided by the user
- Only select quotes that directly mention or discuss the specific topic keywords
- Do NOT include general quotes about the broader subject area unless they specifically mention the topic keywords
- Preserve the original wording exactly as it appears in the text{OCR_NOTE if is_ocr else ""}
- For each quote, provide a brief explanation of why it's specifically relevant to the topic
- Return only valid JSON formatted as an array of objects with: {{"quote": "exact text", "relevance": "brief explanation"}}"""


def build_user_prompt(topic: str, candidate_text: str) -> str:
    return f'Topic: "{topic}"\n\nText segments:\n{candidate_text}'
