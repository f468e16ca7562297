"""Built-in CMS prompt catalog."""

from typing import List

from .base import PromptParameter, PromptTemplate

CREATE_BLOG_POST = PromptTemplate(
    name="create_blog_post",
    description="Template for writing a structured blog post",
    parameters=[
        PromptParameter("topic", "Post topic", required=True),
        PromptParameter(
            "tone", "Post tone (formal, casual, technical)", default="professional"
        ),
    ],
    template="""Write a blog post about "$topic" in a $tone tone.

Expected structure:
1. Catchy title
2. Introduction (1-2 paragraphs)
3. Main body (3-5 sections)
4. Conclusion
5. Call to action

Use the create_post tool to save the content to the CMS.""",
)

SUMMARIZE_POSTS = PromptTemplate(
    name="summarize_posts",
    description="Summarize existing posts in the CMS",
    parameters=[
        PromptParameter("count", "Number of posts to summarize", default="5"),
    ],
    template="""Use the list_posts tool to fetch the latest $count posts from the CMS.

Then write an executive summary that includes:
- Main themes covered
- Key insights from each post
- Trends you notice
- Suggestions for upcoming topics""",
)

CONTENT_IDEAS = PromptTemplate(
    name="content_ideas",
    description="Generate content ideas based on existing posts",
    template="""Analyze the existing posts in the CMS using list_posts.

Based on that content, suggest:
1. 5 new complementary topics
2. Content gaps to fill
3. Opportunities to go deeper
4. Trending themes not yet covered""",
)


def default_prompts() -> List[PromptTemplate]:
    """Return the prompt templates registered at startup, in listing order."""
    return [CREATE_BLOG_POST, SUMMARIZE_POSTS, CONTENT_IDEAS]
