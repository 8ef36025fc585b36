"""Prompt templates for Gemini API calls."""


def build_extraction_prompt(job_description: str) -> str:
    """Job description -> strict JSON requirement set.

    Asks for core skill names (short, common forms) so that the similarity
    dictionary can resolve them, and for the exact field names the validator
    checks.
    """
    return f"""You are a STRICT but FAIR ATS-style job description analyzer.

Extract requirements by MEANING, not exact wording. Skills can be written as
abbreviations (OOP, DBMS, HTML, CSS, SQL) or in context ("Java Development").

EXTRACTION RULES:
1. Use CORE skill names, preferring the shorter common form:
   - "Java Development" -> "Java"
   - "Object-Oriented Programming" -> "OOP"
   - "Database Management Systems" -> "DBMS"
2. Do not over-expand: "Python", not "Python Programming Skills";
   "React", not "React.js Framework Development".
3. Recognize common abbreviations: OOP, DBMS, RDBMS, HTML, CSS, SQL, API, REST,
   JSON, XML, AWS, GCP, Azure, CI/CD, ML, AI, DevOps.
4. Required vs preferred:
   - "Must have" / "Required" / "Essential" -> requiredSkills
   - "Nice to have" / "Preferred" / "Bonus" -> preferredSkills
   - If unclear, use requiredSkills.
5. Only list skills that the job description actually mentions.

EXTRACT:
- requiredSkills: essential skills
- preferredSkills: nice-to-have skills
- requiredExperience: minimum years as a number (0 if not stated)
- educationRequirement: minimum degree, one of "PhD", "Master's", "Bachelor's",
  "Associate's", "Diploma", or null if not stated
- responsibilities: key job duties
- keywords: important domain or industry terms

JOB DESCRIPTION:
---
{job_description}
---

Respond with ONLY valid JSON (no markdown, no code fences) in this exact structure:
{{
  "requiredSkills": ["Java", "OOP", "Spring Boot", "MySQL"],
  "preferredSkills": ["AWS", "Docker"],
  "requiredExperience": 3,
  "educationRequirement": "Bachelor's",
  "responsibilities": ["Design backend services", "Write maintainable code"],
  "keywords": ["backend", "microservices", "agile"]
}}"""
