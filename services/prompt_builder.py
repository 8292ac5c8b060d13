"""Prompt builder for content generation.

Renders the system instruction for one model call from a content type, the
user's preferences and the output language. The source text itself is never
embedded here; it travels to the model as a separate user message.

Templates are pure functions registered by content type (PROMPT_TEMPLATES)
and, for content-creator output, by platform (PLATFORM_TEMPLATES). Unknown
types and platforms fall back to generic templates.
"""
import logging
import math
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from models.content_preferences import (
    ArticlePreferences,
    BasePreferences,
    ContentCreatorPreferences,
    ContentPreferences,
    GenericPreferences,
    MeetingPreferences,
    PromptPreferences,
    TasksPreferences,
    parse_preferences,
)

logger = logging.getLogger(__name__)

PromptTemplate = Callable[[Any, str], str]

NORWEGIAN_INSTRUCTION = (
    "IMPORTANT: Respond entirely in Norwegian. Even if the source text is in "
    "English or any other language, ALL output must be written in Norwegian.\n"
    "VIKTIG: Skriv ALT innhold på NORSK."
)
ENGLISH_INSTRUCTION = "Write all content in English."

NONE_PROVIDED = "None provided"


def language_instruction(language: str) -> str:
    """Return the output-language directive for 'no' (Norwegian) or anything else (English)."""
    return NORWEGIAN_INSTRUCTION if language == "no" else ENGLISH_INSTRUCTION


def build_prompt(
    text: str,
    preferences: Union[ContentPreferences, Mapping[str, Any], None],
    language: str = "en"
) -> str:
    """Render the system instruction for one chunk (or the whole text).

    Output is a pure function of (preferences, language): identical
    arguments always produce an identical string.

    Args:
        text: The chunk or full text this prompt will accompany
        preferences: A ContentPreferences variant or a raw mapping
        language: 'en' or 'no'

    Returns:
        The rendered instruction prompt
    """
    prefs = parse_preferences(preferences)
    template = PROMPT_TEMPLATES.get(prefs.type, render_generic_prompt)

    logger.debug(
        f"Building prompt: type={prefs.type}, language={language}, "
        f"text_length={len(text)} chars"
    )

    return template(prefs, language_instruction(language))


# --- Helpers ---

def _value(value: Optional[str], default: str) -> str:
    if value is None or not str(value).strip():
        return default
    return str(value).strip()


def _labeled_lines(fields: List[Tuple[str, Optional[str]]]) -> str:
    """Render 'Label: value' lines, skipping empty values."""
    return "\n".join(
        f"{label}: {value.strip()}"
        for label, value in fields
        if value and value.strip()
    )


def _customization_block(prefs: BasePreferences) -> str:
    lines = _labeled_lines([
        ("Tone", prefs.tone),
        ("Style", prefs.style),
        ("Audience", prefs.audience),
        ("Additional notes", prefs.notes),
    ])
    return f"\n\nUSER PREFERENCES:\n{lines}" if lines else ""


def _parse_range(value: Optional[str], default: Tuple[int, int]) -> Tuple[int, int]:
    """Parse an 'N-M' range such as '30-60'; fall back to default on bad input."""
    try:
        low, high = (int(part.strip()) for part in str(value).split("-", 1))
    except (TypeError, ValueError):
        return default
    if low <= 0 or high < low:
        return default
    return low, high


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _format_seconds(seconds: int) -> str:
    return f"{seconds // 60}:{seconds % 60:02d}"


# --- Content-creator platform templates ---

SHORT_VIDEO_HOOKS = {
    "question": "Open with an intriguing question that creates an immediate curiosity gap",
    "bold_statement": "Start with a controversial or surprising statement that stops the scroll",
    "surprising_fact": "Begin with an unexpected statistic or fact that challenges assumptions",
}
DEFAULT_SHORT_VIDEO_HOOK = "Open with story tension or a cliffhanger that demands resolution"

SHORT_VIDEO_CTAS = {
    "follow": "Follow for more insights like this",
    "save": "Save this for later reference",
    "share": "Share this with someone who needs to see it",
}
DEFAULT_SHORT_VIDEO_CTA = "Comment your biggest takeaway below"


def render_short_video_prompt(prefs: ContentCreatorPreferences, language_line: str) -> str:
    duration = _value(prefs.duration, "30-60")
    _, max_seconds = _parse_range(duration, (30, 60))
    close_start = max(3, max_seconds - 7)
    hook = SHORT_VIDEO_HOOKS.get(prefs.hook_type or "question", DEFAULT_SHORT_VIDEO_HOOK)
    cta = SHORT_VIDEO_CTAS.get(prefs.call_to_action or "follow", DEFAULT_SHORT_VIDEO_CTA)

    return f"""You are a viral short-form video strategist and script writer. Create a production-ready {duration}-second script based on the audio content that follows proven engagement formulas.

{language_line}

CONTENT STYLE: {_value(prefs.content_style, "educational")}

CRITICAL REQUIREMENTS:
- Script length: {duration} seconds at 150-160 WPM
- Hook viewers within the first 3 seconds
- Maintain visual interest every 3-5 seconds
- Include retention hooks throughout
- End with a strong, specific call-to-action

HOOK (0:00-0:03):
{hook}

CONTENT DEVELOPMENT (0:03-{_format_seconds(close_start)}):
- Pattern interrupts: break expectations every few seconds
- Contrast: before/after, right/wrong, old/new ways
- Personal stakes: why this matters to the viewer
- Urgency: why they need to know this now

STRONG CLOSE ({_format_seconds(close_start)}-{_format_seconds(max_seconds)}):
- Pay off the hook promise
- One key takeaway
- Specific CTA: {cta}

PRODUCTION NOTES:
- Text overlays for key points and numbers
- Cut or transition every 2-3 seconds
- Full captions with emphasis on key words

Custom user instructions: {_value(prefs.notes, NONE_PROVIDED)}

Create a complete, word-for-word script focused on practical, actionable insights from the audio."""


def render_youtube_prompt(prefs: ContentCreatorPreferences, language_line: str) -> str:
    target_length = _value(prefs.target_length, "8-10")
    min_minutes, max_minutes = _parse_range(target_length, (8, 10))
    avg_minutes = _round_half_up((min_minutes + max_minutes) / 2)
    total_words = avg_minutes * 150
    main_end = max(1, max_minutes - 2)

    return f"""You are a YouTube algorithm expert and script writer. Create a comprehensive {target_length}-minute video script optimized for watch time, engagement and algorithm performance.

{language_line}

TARGET: {total_words} words ({avg_minutes} minutes at natural speaking pace)
VIDEO FORMAT: {_value(prefs.video_format, "educational")}

HOOK SEQUENCE (0:00-0:15):
- Grab attention in the first 3 seconds
- Clearly state what viewers will learn
- Preview: "By the end of this video, you'll know exactly..."

INTRODUCTION (0:15-1:00):
- The problem this solves and why it matters now
- What is coming up in the video

MAIN CONTENT (1:00-{main_end}:00):
CHAPTER 1: Foundation and context
CHAPTER 2: Step-by-step deep dive with real examples
CHAPTER 3: Advanced applications, tools and resources

RETENTION HOOKS (every 60-90 seconds):
- "The next point might surprise you..."
- "This is where most people mess up..."

CONCLUSION ({main_end}:00-{max_minutes}:00):
- Key takeaways and action steps
- Related video suggestions
- Like, comment and subscribe prompt

Custom user instructions: {_value(prefs.notes, NONE_PROVIDED)}

Create a complete script that delivers comprehensive, actionable insights from the audio content."""


LINKEDIN_WORD_TARGETS = {"short": "100-200", "medium": "200-400"}


def render_linkedin_prompt(prefs: ContentCreatorPreferences, language_line: str) -> str:
    post_length = _value(prefs.post_length, "medium")
    target_words = LINKEDIN_WORD_TARGETS.get(post_length, "400-600")

    return f"""You are a LinkedIn thought leader and content strategist. Create a high-engagement professional post based on the audio content that drives meaningful business conversations.

{language_line}

TARGET LENGTH: {target_words} words
CONTENT TONE: {_value(prefs.content_tone, "professional_insights")}

HOOK (first 125 characters, visible in the mobile preview):
- Challenge conventional wisdom, share a personal revelation or ask a sharp question

STORYTELLING STRUCTURE:
SETUP: context and what led to this insight
CONFLICT: what wasn't working
RESOLUTION: what actually works and the lessons learned

ENGAGEMENT DRIVERS:
- Ask specific questions
- Invite professional opinions and experiences

FORMATTING:
- Line breaks for readability
- 1-2 professional emojis maximum
- 3-5 industry-relevant hashtags

Custom user instructions: {_value(prefs.notes, NONE_PROVIDED)}

Transform the audio insights into professional content that establishes thought leadership."""


def render_facebook_prompt(prefs: ContentCreatorPreferences, language_line: str) -> str:
    return f"""You are a Facebook engagement specialist. Create a highly shareable post based on the audio content that drives meaningful community interaction.

{language_line}

ENGAGEMENT GOAL: {_value(prefs.engagement_goal, "discussion")}
AUDIENCE: {_value(prefs.audience_type, "business_page")}

HOOK (first 40 characters, above the fold):
- Emotional trigger, relatable situation or surprising statement

STORYTELLING APPROACH:
- Personal, relatable narrative built from the audio content
- Vivid, specific details
- Inclusive language and shared values

ENGAGEMENT TRIGGERS:
- Ask for personal stories, advice or opinions
- End with a clear conversation starter

FORMATTING:
- Short paragraphs (2-3 sentences)
- Mobile-first line breaks
- 3-5 emojis in total

Custom user instructions: {_value(prefs.notes, NONE_PROVIDED)}

Create authentic, engaging content that builds community around the insights from the audio."""


def render_twitter_prompt(prefs: ContentCreatorPreferences, language_line: str) -> str:
    return f"""You are a Twitter thread strategist and viral content creator. Transform the audio content into a compelling thread that maximizes engagement and shareability.

{language_line}

THREAD TARGET: {_value(prefs.thread_length, "5-8")} tweets
CONTENT STYLE: {_value(prefs.content_style, "educational")}

TWEET 1 (HOOK):
- Stop the scroll with a bold statement
- Promise valuable insights and open a curiosity gap
- Include a thread indicator

VALUE TWEETS:
- One key insight per tweet with a specific example
- Numbers and data where possible
- End each tweet with curiosity for the next

FINAL TWEET:
- Summarize the key takeaway
- Ask for engagement
- 2-3 relevant hashtags

RULES:
- Maximum 280 characters per tweet
- Number the thread (1/N, 2/N, ...)

Custom user instructions: {_value(prefs.notes, NONE_PROVIDED)}

Create a thread that turns the audio insights into tweetable wisdom."""


BLOG_WORD_COUNTS = {"short": "1000-1500", "medium": "2000-3000"}


def render_blog_prompt(prefs: ContentCreatorPreferences, language_line: str) -> str:
    target_length = _value(prefs.target_length, "medium")
    word_count = BLOG_WORD_COUNTS.get(target_length, "3500-5000")

    return f"""You are a professional blog content strategist and writer. Create a comprehensive, SEO-optimized blog post based on the audio content.

{language_line}

TARGET LENGTH: {word_count} words
WRITING STYLE: {_value(prefs.writing_style, "conversational")}
SEO OPTIMIZATION: {_value(prefs.seo_focus, "moderate")}

HEADLINE: offer 3 options (benefit-driven, number-based, question-based)

INTRODUCTION (150-200 words): hook, problem, promise, preview

MAIN SECTIONS:
1. Foundation and context
2. Core insights from the audio
3. Advanced strategies
4. Implementation steps

SEO:
- Natural keyword integration
- Meta description suggestion

CONCLUSION (100-150 words): recap, next steps, call-to-action

Custom user instructions: {_value(prefs.notes, NONE_PROVIDED)}

Transform the audio content into a blog post that provides exceptional value to readers."""


def render_platform_fallback_prompt(prefs: ContentCreatorPreferences, language_line: str) -> str:
    platform = _value(prefs.platform, "social media")

    return f"""You are a professional content strategist specializing in {platform} content creation. Transform the provided audio content into platform-optimized, engaging material.

{language_line}

PLATFORM: {platform}

CONTENT STRATEGY:
- Extract core insights from the audio
- Adapt to platform best practices
- End with a strong call-to-action

CUSTOMIZATION:
- Tone: {_value(prefs.tone, "professional yet approachable")}
- Style: {_value(prefs.style, "informative and engaging")}
- Audience: {_value(prefs.audience, "professionals in the field")}

Custom user instructions: {_value(prefs.notes, "Focus on practical, actionable insights")}"""


PLATFORM_TEMPLATES: Dict[str, PromptTemplate] = {
    "short-videos": render_short_video_prompt,
    "tiktok": render_short_video_prompt,
    "instagram-reels": render_short_video_prompt,
    "youtube-shorts": render_short_video_prompt,
    "youtube-videos": render_youtube_prompt,
    "youtube": render_youtube_prompt,
    "linkedin-posts": render_linkedin_prompt,
    "linkedin": render_linkedin_prompt,
    "facebook-posts": render_facebook_prompt,
    "facebook": render_facebook_prompt,
    "twitter-threads": render_twitter_prompt,
    "twitter": render_twitter_prompt,
    "blog-posts": render_blog_prompt,
    "blog": render_blog_prompt,
}


def render_content_creator_prompt(prefs: ContentCreatorPreferences, language_line: str) -> str:
    platform = (prefs.platform or "").strip().lower()
    template = PLATFORM_TEMPLATES.get(platform, render_platform_fallback_prompt)
    return template(prefs, language_line)


# --- Content type templates ---

ARTICLE_WORD_COUNTS = {"short": "800-1200", "medium": "1500-2500"}

ARTICLE_OUTLINES = {
    "opinion_piece": [
        "Personal perspective and stance",
        "Supporting arguments with evidence",
        "Counter-arguments and rebuttals",
        "Call for action or change",
    ],
    "financial_article": [
        "Market analysis and trends",
        "Financial data and statistics",
        "Investment implications",
        "Risk assessment and recommendations",
    ],
    "movie_review": [
        "Plot summary (spoiler-free)",
        "Performance and technical analysis",
        "Thematic elements",
        "Recommendation and rating",
    ],
    "book_review": [
        "Brief plot overview (no spoilers)",
        "Character development and prose quality",
        "Thematic depth",
        "Recommendation and rating",
    ],
    "music_review": [
        "Album or song overview and context",
        "Composition, production and lyrics",
        "Comparison to previous works",
        "Overall assessment",
    ],
}
DEFAULT_ARTICLE_OUTLINE = [
    "Detailed analysis of key topics",
    "Supporting evidence and examples",
    "Practical applications",
    "Industry implications",
]


def render_article_prompt(prefs: ArticlePreferences, language_line: str) -> str:
    article_type = _value(prefs.article_type, "opinion_piece")
    target_length = _value(prefs.target_length, "medium")
    word_count = ARTICLE_WORD_COUNTS.get(target_length, "3000-5000")
    body_words = _round_half_up(int(word_count.split("-")[1]) * 0.7)
    outline = "\n".join(f"- {item}" for item in ARTICLE_OUTLINES.get(article_type, DEFAULT_ARTICLE_OUTLINE))
    readable_type = article_type.replace("_", " ")

    return f"""You are a professional {readable_type} writer. Create a comprehensive {target_length} length article ({word_count} words) based on the provided audio content.

{language_line}

ARTICLE TYPE: {readable_type.upper()}
TARGET LENGTH: {word_count} words
WRITING STYLE: {_value(prefs.writing_style, "informative")}
AUDIENCE: {_value(prefs.audience, "general_public").replace("_", " ")}

STRUCTURE:
HEADLINE: compelling, SEO-friendly headline based on the main topic
SUBHEADLINE: supporting statement that adds context

INTRODUCTION (150-250 words): hook, context, thesis

MAIN BODY ({body_words} words):
{outline}

CONCLUSION (100-200 words): key points, final thoughts, call-to-action

FORMATTING:
- Subheadings for easy scanning
- Relevant quotes from the audio
- Bullet points for key takeaways

Custom user instructions: {_value(prefs.notes, NONE_PROVIDED)}"""


def render_meeting_prompt(prefs: MeetingPreferences, language_line: str) -> str:
    meeting_details = _labeled_lines([
        ("Meeting type", prefs.meeting_type),
        ("Objectives", prefs.meeting_objectives),
        ("Focus", prefs.meeting_focus),
        ("Participants", prefs.meeting_participants),
    ])
    details_block = f"\n\nMEETING DETAILS:\n{meeting_details}" if meeting_details else ""

    return f"""You are a professional meeting notes expert. Analyze the meeting recording, identify the different speakers and extract:

{language_line}{details_block}

SPEAKER IDENTIFICATION:
- Use names if mentioned, otherwise descriptive labels (Speaker A, Speaker B, Main Presenter)
- Note when the conversation shifts between speakers

1. Key Discussion Points by Speaker
2. Decisions Made, including who made or influenced each decision
3. Action Items by Person, with deadlines if mentioned
4. Follow-up Items and topics for the next meeting

Attribute statements and responsibilities clearly: "Speaker A mentioned...", "John will handle..."{_customization_block(prefs)}"""


def render_tasks_prompt(prefs: TasksPreferences, language_line: str) -> str:
    return f"""You are a task organization expert. Convert the following content into a structured {_value(prefs.task_type, "task")} list.

{language_line}

For each task, include:
- Clear, actionable description
- Priority level
- Estimated time/effort
- Any dependencies or prerequisites{_customization_block(prefs)}"""


def render_prompt_engineering_prompt(prefs: PromptPreferences, language_line: str) -> str:
    if prefs.prompt_mode == "initial":
        return f"""You are a prompt engineering expert. Based on the user's description, create 3 different variations of clear, effective prompts for {_value(prefs.prompt_type, "general use")}.

{language_line}

Format the output exactly like this:

1. [First prompt variation]

2. [Second prompt variation]

3. [Third prompt variation]

Tips for Best Results:
- [Tip 1]
- [Tip 2]
- [Tip 3]"""

    return f"""You are a prompt engineering expert helping users refine their interactions with AI models. Analyze the LLM's output and the user's question, then provide:

{language_line}

1. A clear, refined response to address the LLM's questions
2. Suggestions for additional context that could improve the response
3. Alternative approaches to consider

Original LLM Output:
{_value(prefs.llm_output, NONE_PROVIDED)}

User's Question/Concern:
{_value(prefs.notes, NONE_PROVIDED)}"""


def render_generic_prompt(prefs: GenericPreferences, language_line: str) -> str:
    notes = _labeled_lines([
        ("Additional notes", prefs.notes),
        ("Genre", prefs.author_genre),
        ("Writing style", prefs.author_style),
        ("Context", prefs.author_context),
        ("Instructions", prefs.author_instructions),
        ("Continue from this text", prefs.author_paste_text),
    ])
    notes_block = f"\n{notes}" if notes else ""

    return f"""Convert the following content into a well-structured {prefs.type} format.

{language_line}

Consider the following preferences:
Tone: {_value(prefs.tone, "Professional")}
Style: {_value(prefs.style, "Informative")}
Target audience: {_value(prefs.audience, "General audience")}{notes_block}

Do not add introductions, conclusions or section headers unless specifically requested."""


PROMPT_TEMPLATES: Dict[str, PromptTemplate] = {
    "tasks": render_tasks_prompt,
    "meeting": render_meeting_prompt,
    "content-creator": render_content_creator_prompt,
    "article": render_article_prompt,
    "prompt": render_prompt_engineering_prompt,
}
