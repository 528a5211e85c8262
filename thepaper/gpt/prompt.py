CATEGORIES = [
    "AI/ML", "Web Development", "Backend", "DevOps", "Mobile", "Security",
    "Data", "Cloud", "Open Source", "Career", "General",
]

score_prompt = """Rate the following article's relevance for a daily programming and technology newsletter on a scale of 0-10.
Consider:
- Technical depth and value
- Relevance to software developers
- Timeliness and importance
- Novelty and interest

Article:
Title: {title}
Description: {description}

Respond with ONLY a number between 0 and 10. You may use half increments (e.g., 7.5, 8.5, 9.5)."""

tag_prompt = """Analyze this article and provide:
1. A category (ONE of: {categories})
2. 2-3 relevant tags (short keywords)

Article:
Title: {title}
Description: {description}

Respond in this EXACT format:
Category: [category]
Tags: [tag1, tag2, tag3]"""

summary_prompt = """Summarize the following article in ONE concise sentence for a technical audience.
Focus on the single most important technical point or takeaway.

Article:
Title: {title}
Content: {content}

Summary:"""
