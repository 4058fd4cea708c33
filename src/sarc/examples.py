"""
Example survey for demos and tests.

A brand funnel: awareness (Q1) pipes into usage (Q2), usage pipes into
favourite (Q3), and consideration (Q4) pipes the brands NOT known from Q1.
Q5 is unrelated and carries options suited to exclusivity rules.
"""
from sarc.model import NONE_OF_THE_ABOVE, Option, OptionKind, PipingMode, Question, Survey

BRANDS = ["Alpha", "Bravo", "Charlie", "Delta", "Echo", "Foxtrot"]
OTHER_CODE = 7


def _brand_options(with_other: bool = True, with_none: bool = False):
    options = [Option(code=i, label=name) for i, name in enumerate(BRANDS, start=1)]
    if with_other:
        options.append(Option(code=OTHER_CODE, label="Other (specify)", kind=OptionKind.FIXED))
    if with_none:
        options.append(Option(code=NONE_OF_THE_ABOVE, label="None of these"))
    return options


def build_example_survey() -> Survey:
    survey = Survey(name="Example Brand Funnel")

    survey.questions = [
        Question(
            id=1,
            text="Which of these brands have you heard of?",
            options=_brand_options(with_other=True, with_none=True),
        ),
        Question(
            id=2,
            text="Which of these brands have you used?",
            options=_brand_options(with_other=True),
            piping_parent=1,
            piping_mode=PipingMode.INCLUDE,
        ),
        Question(
            id=3,
            text="Which brand is your favourite?",
            options=_brand_options(with_other=False),
            piping_parent=2,
            piping_mode=PipingMode.INCLUDE,
        ),
        Question(
            id=4,
            text="Which of these brands would you consider?",
            options=_brand_options(with_other=False, with_none=True),
            piping_parent=1,
            piping_mode=PipingMode.EXCLUDE,
        ),
        Question(
            id=5,
            text="Where do you usually shop?",
            options=[
                Option(code=10, label="Supermarket"),
                Option(code=11, label="Convenience store"),
                Option(code=12, label="Online"),
                Option(code=13, label="Market"),
                Option(code=14, label="I never shop myself"),
                Option(code=15, label="Other", kind=OptionKind.FIXED),
            ],
        ),
    ]

    return survey
