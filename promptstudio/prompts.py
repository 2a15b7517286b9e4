from textwrap import dedent

_REMIX_INSTRUCTIONS = dedent(
    """\
    Rewrite the following image prompt to be more descriptive and visually appealing, suitable for an AI image generator.
    Keep the same subject matter. Respond with the rewritten prompt only, without quotes or commentary."""
)


def get_remix_prompt(prompt: str) -> str:
    # interpolated after dedent so multi-line prompts keep their own layout
    return f'{_REMIX_INSTRUCTIONS}\n\n"{prompt.strip()}"'
