"""Instruction strings for the three pipeline phases.

Domain judgment (what counts as a claim, which evidence is good enough,
which label applies) is delegated to the model through these
instructions. Only the output shape is enforced locally.
"""

EXTRACTION_INSTRUCTIONS = """# INSTRUCTIONS
You extract **verifiable, atomic factual claims** from a news article. Your output is a JSON object following the provided schema. Do not add fields or prose.

## WHAT COUNTS AS A CLAIM
- A statement that can be checked against independent evidence (facts about *who/what/when/where/how many*).
- Treat **attributed statements** as claims about the *attribution*, e.g. "The PM said inflation fell" -> verifiable claim: "The PM said [on DATE/at EVENT] that inflation fell." You are not judging the truth here, only extracting the claim precisely.
- **Exclude** pure opinions ("terrible policy"), predictions, value judgments, vague or hedged language without a concrete proposition, and satire.

## Make claims atomic
- Split conjunctions: "X and Y happened" -> two claims.
- Keep each claim to a **single subject-predicate-object** proposition.
- Prefer **specifics**: include numbers, dates, locations, named entities and units.

## Normalize & enrich
- Normalize dates to `YYYY-MM-DD` when explicit; otherwise use `null`.
- Keep quantities with their units (e.g. "12.3%", "A$5b").
- Canonicalize entities where possible (organization, person and place names).
- If a quote spans many words, **summarize the proposition**, not the wording.

## Guardrails
- Do not copy boilerplate, captions, or unrelated background unless it is asserted as a fact in the article.
- If the piece only contains opinions, return a minimal set of claims.
- Output **5-20** claims prioritizing **high-importance** ones (central to the headline and lede). If the article is short, fewer is fine. Never output more than 20.

## Fields (all required)
- `id`: string, unique within this response ("c01", "c02", ...).
- `text`: the claim in 1 sentence, at most 220 characters, no hedging ("reportedly", "appears") unless it is part of an attribution claim.
- `importance`: "high" | "medium" | "low".
- `subject`: canonical entity or noun phrase.
- `predicate`: concise verb phrase ("reported", "passed", "increased to").
- `object`: concise complement (may be "" if intransitive).
- `time`: ISO date string or null.
- `location`: city/state/country or null.
- `entities`: array of { name, type } where type is one of PERSON, ORG, GPE, EVENT, PRODUCT, OTHER.
- `retrieval_query`: 6-16 word search query you would use to verify this claim (key entities, numbers, time and location).
- `source_sentence`: the **verbatim** sentence the claim was derived from (at most 280 characters).

## Checklist before returning
- Are claims atomic and verifiable?
- Are numbers, dates and places preserved when present?
- Are attributions framed as claims about who said what, when and where?
- Are there 5-20 claims (fewer if the article is short) with importance prioritized?

Return JSON only."""


EVIDENCE_INSTRUCTIONS = """# INSTRUCTIONS
You gather **evidence passages** for a list of factual claims. The input is a JSON object with `claims_list` (the extracted claims) and `policy` (retrieval policy). Your final output is a JSON object following the provided schema.

## Searching
- Use the `web_evidence_search` tool. Start from each claim's `retrieval_query`; refine and re-query when results are weak.
- You may call the tool several times per claim and across several turns.
- Set `time_window_days` from the claim's date: for a dated claim, search a window that covers that date; otherwise use `policy.time_window_days`. Never exceed `policy.time_window_days` or 365.
- Set `max_results` between 3 and 10.
- Tool results carry a `status`: "ok" with `results`, "no_evidence_found" when nothing matched, or "error" when the call was rejected.

## Selecting evidence
- Prefer **primary sources** (official statistics, court records, company filings, government releases, original reporting) over secondary coverage.
- Aim for passages from **at least 2 distinct domains** per claim.
- Each passage must be a verbatim excerpt of **1-3 sentences** taken from a tool result.
- Include evidence that contradicts a claim as well as evidence that supports it.

## Output
- `id`: stable evidence id unique in this response ("e01", "e02", ...). Later steps cite these ids.
- `url`, `title`, `published_at` (ISO-8601) come from the tool result.
- `passage`: the excerpt.
- `source_type`: "primary", "secondary" or "unknown".
- When no evidence is obtainable for a claim (status "no_evidence_found" or "error"), add nothing for it. Returning an empty `results` array is valid.

Do not invent URLs, dates or passages. Return JSON only."""


VERIFICATION_INSTRUCTIONS = """# INSTRUCTIONS
You assess factual claims against retrieved evidence. The input is a JSON object `claims_package` with `claims_list` (the claims) and `evidence_bundle` (evidence passages with ids). Your output is a JSON object following the provided schema.

## Per-claim labels
Produce exactly one assessment per claim, using the claim's `id` as `claim_id`.
- **SUPPORTED**: the evidence directly supports the claim. Cite at least one evidence id.
- **CONTRADICTED**: the evidence directly refutes the claim. Cite at least one evidence id.
- **INSUFFICIENT_EVIDENCE**: evidence is absent, weak, off-topic or conflicting. Citations may be empty.
- Only cite ids that appear in `evidence_bundle.results`.
- `confidence` is a number between 0 and 1.
- `rationale`: 1-3 sentences explaining the label with reference to the cited passages.

## Article verdict
Weigh high-importance claims most.
- **TRUE**: all high-importance claims are SUPPORTED and no claim is CONTRADICTED.
- **MIXED**: both SUPPORTED and CONTRADICTED claims are present.
- **MISLEADING**: mostly SUPPORTED, but at least one high-importance claim is CONTRADICTED.
- **FALSE**: a majority of high-importance claims are CONTRADICTED.
- **UNVERIFIABLE**: a majority of high-importance claims are INSUFFICIENT_EVIDENCE.
- `key_factors`: short phrases naming the claims and evidence that drove the verdict.

Do not use outside knowledge to override the evidence. Return JSON only."""
