"""
Azure Foundry / Azure OpenAI REST client for CV generation.

The client is built once by the caller and passed to every operation:

    client = GPTClient(GPTConfig.from_env())
    content = generate_hiring_documents(client, request)
    render(content.revamped_cv, request.details)

Environment variables read by GPTConfig.from_env():
  - AZURE_FOUNDRY_ENDPOINT
  - AZURE_FOUNDRY_KEY
  - AZURE_DEPLOYMENT_NAME
  - AZURE_API_VERSION (optional)
"""

import json
import logging
import os
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests
from jinja2 import Template

from .models import ChatMessage, GeneratedContent, HiringRequest, Score

logger = logging.getLogger(__name__)

DEFAULT_API_VERSION = "2025-01-01-preview"
RETRY_STATUSES = (429, 500, 502, 503)


class GenerationError(RuntimeError):
    """Configuration, transport or payload failure talking to the generation service."""


# -------------------------
# Configuration
# -------------------------
@dataclass(frozen=True)
class GPTConfig:
    endpoint: str
    key: str
    deployment: str
    api_version: str = DEFAULT_API_VERSION

    @classmethod
    def from_env(cls) -> "GPTConfig":
        endpoint = os.getenv("AZURE_FOUNDRY_ENDPOINT")
        key = os.getenv("AZURE_FOUNDRY_KEY")
        deployment = os.getenv("AZURE_DEPLOYMENT_NAME")
        if not (endpoint and key and deployment):
            raise GenerationError(
                "Azure configuration missing: set AZURE_FOUNDRY_ENDPOINT, AZURE_FOUNDRY_KEY and AZURE_DEPLOYMENT_NAME."
            )
        return cls(
            endpoint=endpoint.rstrip("/"),
            key=key,
            deployment=deployment,
            api_version=os.getenv("AZURE_API_VERSION", DEFAULT_API_VERSION),
        )

    @property
    def url(self) -> str:
        return f"{self.endpoint}/openai/deployments/{self.deployment}/chat/completions?api-version={self.api_version}"


# -------------------------
# Client
# -------------------------
class GPTClient:
    def __init__(self, config: GPTConfig, session: Optional[requests.Session] = None,
                 retries: int = 3, timeout: float = 60, backoff: float = 2.0):
        self.config = config
        self.session = session or requests.Session()
        self.retries = retries
        self.timeout = timeout
        self.backoff = backoff

    def _do_request(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        headers = {"Content-Type": "application/json", "api-key": self.config.key}

        for attempt in range(self.retries):
            wait_time = (attempt + 1) * self.backoff
            try:
                resp = self.session.post(self.config.url, headers=headers, json=payload, timeout=self.timeout)
            except requests.exceptions.RequestException as e:
                logger.warning("Network error (%d/%d): %s", attempt + 1, self.retries, e)
                time.sleep(wait_time)
                continue

            logger.debug("Azure call status %s", resp.status_code)
            if resp.status_code == 200:
                return resp.json()

            # rate limit or temporary errors
            if resp.status_code in RETRY_STATUSES:
                logger.warning("Retry %d/%d after %.0fs: %s", attempt + 1, self.retries, wait_time, resp.status_code)
                time.sleep(wait_time)
                continue

            try:
                body = resp.json()
            except ValueError:
                body = resp.text
            raise GenerationError(f"Request failed ({resp.status_code}): {body}")

        raise GenerationError("Generation service unreachable after multiple retries.")

    def chat_completion(self, messages: List[Dict[str, str]], max_tokens: int = 400, temperature: float = 0.6) -> str:
        payload = {"messages": messages, "max_tokens": max_tokens, "temperature": temperature}
        result = self._do_request(payload)
        choices = result.get("choices") or []
        if not choices:
            raise GenerationError(f"No choices in response: {json.dumps(result)[:300]}")
        content = (choices[0].get("message") or {}).get("content") or ""
        return content.strip()


# -------------------------
# Prompts
# -------------------------
HIRING_DOCUMENTS_PROMPT = Template("""
Act as an expert career coach and professional resume writer. Generate three documents
(cover letter, revamped CV, LinkedIn message) and three scores.

**Candidate's Personal Details:**
Full Name: {{ d.full_name }}
Email: {{ d.email }}
Phone: {{ d.phone }}
Address: {{ d.address }}

**Output Language:** All documents and summaries MUST be written entirely in **{{ r.language }}**.

**Job Title:** {{ r.job_title }}
**Company Name:** {{ r.company_name }}

**Job Description:**
```
{{ r.job_description }}
```

**Instructions:**
1. Tone must be strictly **{{ r.tone }}**, style tailored to a **{{ r.company_type }}**.
2. Cover Letter: concise and specific to the '{{ r.job_title }}' role, no generic filler.
3. Revamped CV: rewrite the CV for this job. FORMATTING IS MANDATORY:
   - section titles in ALL CAPS on their own line (e.g. "PROFESSIONAL SUMMARY", "WORK EXPERIENCE", "EDUCATION", "SKILLS");
   - each WORK EXPERIENCE / EDUCATION entry on one line: organization | title | dates (e.g. "Acme Corp | Engineer | Jan 2020 - Present");
   - responsibilities as bullet lines starting with "- ";
   - plain text only, no markdown.
4. LinkedIn Message: under 300 characters, to a recruiter at '{{ r.company_name }}', introducing {{ d.full_name }}.

**Scores** (0-100 each, with a brief summary): jobFit (CV vs. job description), company (workplace
quality of {{ r.company_name }}), ats (ATS friendliness of the revamped CV).

Respond with a single valid JSON object, no markdown fences:
{"coverLetter": "...", "revampedCV": "...", "linkedinMessage": "...",
 "scores": {"jobFit": {"score": 0, "summary": "..."}, "company": {"score": 0, "summary": "..."}, "ats": {"score": 0, "summary": "..."}}}
""")

TRANSCRIPT_CV_PROMPT = Template("""
Based on the following interview transcript, create a professional CV in plain text.
Use ALL CAPS section titles on their own line, one line per job or degree with its dates,
and "- " bullet lines for details. Output only the CV content itself.

**Interview Transcript:**
```
{{ transcript }}
```
""")

INTERVIEW_SYSTEM_PROMPT = Template("""You are a friendly and professional career coach. Your goal is to conduct an interview to build a comprehensive and professional CV for the user.
**IMPORTANT: You MUST conduct the entire interview in {{ language }}. All your questions must be in {{ language }}.**
Ask questions one by one, covering the following sections in order:
1. Personal Details: Full Name, Phone Number, Email, LinkedIn Profile URL (optional).
2. Professional Summary: a brief, 2-3 sentence summary of their career.
3. Work Experience: for each role (most recent first) ask for Job Title, Company, Location and Start/End Dates, then 3-5 key responsibilities or achievements. Ask if they have more roles to add.
4. Education: for each degree ask for Degree Name, University, Location and Graduation Date.
5. Skills: key technical and soft skills.
6. Projects (optional): name, brief description and technologies used.
Keep your questions clear, concise and encouraging. When you have everything, end with '{{ closing }}'""")

CLOSING_LINES = {
    "English": "Thank you! I have all the information needed to create your CV.",
    "Bahasa Indonesia": "Terima kasih! Saya memiliki semua informasi yang dibutuhkan untuk membuat CV Anda.",
}


def interview_system_prompt(language: str = "English") -> str:
    """System instruction for an external interview chat that gathers CV details."""
    closing = CLOSING_LINES.get(language, CLOSING_LINES["English"])
    return INTERVIEW_SYSTEM_PROMPT.render(language=language, closing=closing)


# -------------------------
# Response parsing
# -------------------------
def _strip_fences(text: str) -> str:
    text = text.strip()
    if text.startswith("```json"):
        text = text[len("```json"):]
    elif text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


def parse_generated_content(raw: str) -> GeneratedContent:
    try:
        data = json.loads(_strip_fences(raw))
    except json.JSONDecodeError as e:
        raise GenerationError(f"Model returned invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise GenerationError("Model returned JSON that is not an object.")

    raw_scores = data.get("scores") or {}
    if not isinstance(raw_scores, dict):
        raise GenerationError("Model returned \"scores\" that is not an object.")

    scores = {}
    for name, value in raw_scores.items():
        if not isinstance(value, dict):
            continue
        try:
            score = int(value.get("score", 0) or 0)
        except (TypeError, ValueError) as e:
            raise GenerationError(f"Score {name!r} is not a number: {value.get('score')!r}") from e
        scores[name] = Score(score=score, summary=str(value.get("summary", "")))

    return GeneratedContent(
        cover_letter=str(data.get("coverLetter", "")),
        revamped_cv=str(data.get("revampedCV", "")),
        linkedin_message=str(data.get("linkedinMessage", "")),
        scores=scores,
    )


# -------------------------
# Business Logic
# -------------------------
def generate_hiring_documents(client: GPTClient, request: HiringRequest) -> GeneratedContent:
    """Cover letter, revamped CV, LinkedIn message and scores for one application."""
    prompt = HIRING_DOCUMENTS_PROMPT.render(d=request.details, r=request)
    messages = [
        {"role": "system", "content": prompt},
        {"role": "user", "content": "--- CANDIDATE'S ORIGINAL CV ---\n" + request.cv_text},
    ]
    raw = client.chat_completion(messages, max_tokens=3000, temperature=0.7)
    content = parse_generated_content(raw)
    logger.info("Generated hiring documents for %s (%d CV lines)",
                request.details.full_name, len(content.revamped_cv.splitlines()))
    return content


def generate_cv_from_transcript(client: GPTClient, messages: List[ChatMessage]) -> str:
    """Plain-text CV from an interview transcript."""
    transcript = "\n".join(
        f"{'Candidate' if m.role == 'user' else 'Interviewer'}: {m.text}" for m in messages
    )
    prompt = TRANSCRIPT_CV_PROMPT.render(transcript=transcript)
    return client.chat_completion([{"role": "user", "content": prompt}], max_tokens=1800, temperature=0.7)
