"""Keyword skill detection over job text."""

import re

# Canonical skill -> patterns (matched case-insensitively on word boundaries)
SKILL_KEYWORDS = {
    "Python": [r"python"],
    "JavaScript": [r"javascript", r"\bjs\b"],
    "TypeScript": [r"typescript"],
    "Go": [r"golang"],
    "Rust": [r"rust"],
    "C++": [r"c\+\+"],
    "Java": [r"java(?!script)"],
    "SQL": [r"sql"],
    "React": [r"react(?:\.js)?"],
    "Kubernetes": [r"kubernetes", r"\bk8s\b"],
    "Docker": [r"docker"],
    "AWS": [r"\baws\b", r"amazon web services"],
    "GCP": [r"\bgcp\b", r"google cloud"],
    "Azure": [r"azure"],
    "Terraform": [r"terraform"],
    "PyTorch": [r"pytorch"],
    "TensorFlow": [r"tensorflow"],
    "JAX": [r"\bjax\b"],
    "CUDA": [r"cuda"],
    "Machine Learning": [r"machine learning", r"\bml\b"],
    "Deep Learning": [r"deep learning"],
    "NLP": [r"\bnlp\b", r"natural language processing"],
    "Reinforcement Learning": [r"reinforcement learning", r"\brlhf\b"],
    "LLMs": [r"\bllms?\b", r"large language models?"],
    "Distributed Systems": [r"distributed systems?"],
    "Data Engineering": [r"data engineering", r"data pipelines?"],
    "Spark": [r"\bspark\b"],
    "Security": [r"security"],
    "Product Management": [r"product management"],
    "Statistics": [r"statistics", r"statistical"],
}

_COMPILED = {
    skill: [re.compile(p if p.startswith(r"\b") else rf"(?<![\w+]){p}(?![\w+])", re.IGNORECASE) for p in patterns]
    for skill, patterns in SKILL_KEYWORDS.items()
}


def detect_skills(*texts: str | None) -> list[str]:
    """Skills mentioned anywhere in `texts`, in table order."""
    blob = "\n".join(t for t in texts if t)
    if not blob:
        return []
    return [skill for skill, patterns in _COMPILED.items() if any(p.search(blob) for p in patterns)]


def merge_labels(*groups) -> list[str]:
    """Union of skill or tag lists, case-insensitive, first spelling wins."""
    seen = {}
    for group in groups:
        for skill in group or []:
            name = str(skill).strip()
            if name and name.lower() not in seen:
                seen[name.lower()] = name
    return list(seen.values())
