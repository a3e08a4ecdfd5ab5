"""Guided session — a multi-turn variant of the pipeline driven one user turn at a time.

The session is a tagged union: each state is its own frozen dataclass carrying
only the fields valid in that state, discriminated by ``step``. Transitions
take a session and the user's input and return ``(new_session, message)``;
they never mutate their input, so a failed model call leaves the caller's
session exactly as it was and the same turn can be retried.

    initial -> select_stack -> awaiting_stack_selection -> answer_questions -> complete

The caller owns the session object and must not run two turns of the same
session concurrently. Nothing here keeps process-wide state.
"""

import sys
from dataclasses import dataclass, field
from typing import Literal, Union

from pma.agents.expander import expand_idea
from pma.agents.guided import generate_guided_plan, generate_open_questions, generate_tech_stacks
from pma.errors import SessionStateError
from pma.models import QuestionAnswer, TechStackOption
from pma.utils.validator import validate_input

AUTO_SELECTION = "auto"


@dataclass(frozen=True)
class Initial:
    idea: str
    step: Literal["initial"] = field(default="initial", init=False)


@dataclass(frozen=True)
class SelectStack:
    """Options generated but not yet shown to the user."""

    idea: str
    expanded_idea: str
    tech_stacks: tuple[TechStackOption, ...]
    step: Literal["select_stack"] = field(default="select_stack", init=False)


@dataclass(frozen=True)
class AwaitingStackSelection:
    idea: str
    expanded_idea: str
    tech_stacks: tuple[TechStackOption, ...]
    step: Literal["awaiting_stack_selection"] = field(
        default="awaiting_stack_selection", init=False
    )


@dataclass(frozen=True)
class AnswerQuestions:
    """Collecting answers. ``answers[i]`` exists only for ``i < current_question_index``."""

    idea: str
    expanded_idea: str
    tech_stacks: tuple[TechStackOption, ...]
    selected_stack: TechStackOption
    questions: tuple[str, ...]
    answers: tuple[str, ...] = ()
    current_question_index: int = 0
    step: Literal["answer_questions"] = field(default="answer_questions", init=False)

    def __post_init__(self):
        if not 0 <= self.current_question_index <= len(self.questions):
            raise SessionStateError(
                f"current_question_index {self.current_question_index} outside "
                f"[0, {len(self.questions)}]."
            )
        if len(self.answers) != self.current_question_index:
            raise SessionStateError(
                f"Expected {self.current_question_index} answers, got {len(self.answers)}."
            )

    @property
    def current_question(self) -> str:
        return self.questions[self.current_question_index]


@dataclass(frozen=True)
class Complete:
    idea: str
    expanded_idea: str
    selected_stack: TechStackOption
    questions: tuple[str, ...]
    answers: tuple[str, ...]
    final_plan: str
    step: Literal["complete"] = field(default="complete", init=False)

    @property
    def questions_and_answers(self) -> list[QuestionAnswer]:
        return [QuestionAnswer(q, a) for q, a in zip(self.questions, self.answers)]


GuidedSession = Union[Initial, SelectStack, AwaitingStackSelection, AnswerQuestions, Complete]


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------


def format_stack_options(tech_stacks) -> str:
    """Numbered list of the options followed by the selection instructions."""
    lines = ["Here are some tech stack options for your idea:", ""]
    for i, stack in enumerate(tech_stacks, 1):
        lines.append(f"{i}. **{stack.name}**: {stack.description}")
        if stack.technologies:
            lines.append(f"   Technologies: {', '.join(stack.technologies)}")
        if stack.pros:
            lines.append(f"   Pros: {'; '.join(stack.pros)}")
        if stack.cons:
            lines.append(f"   Cons: {'; '.join(stack.cons)}")
    lines.append("")
    lines.append(
        f'Reply with a number (1-{len(tech_stacks)}) or "{AUTO_SELECTION}" to pick the first option.'
    )
    return "\n".join(lines)


def reprompt_message(count: int) -> str:
    return f'Please choose a number between 1 and {count}, or "{AUTO_SELECTION}".'


def question_message(session: AnswerQuestions) -> str:
    index = session.current_question_index
    return f"Question {index + 1} of {len(session.questions)}: {session.current_question}"


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------


def parse_selection(selection: str, count: int) -> int | None:
    """Map user input to a 0-based option index, or None when it is not a valid pick.

    "auto" always means the first option.
    """
    text = (selection or "").strip()
    if text.lower() == AUTO_SELECTION:
        return 0
    if not text.isdecimal():
        return None
    number = int(text)
    if 1 <= number <= count:
        return number - 1
    return None


def present_stacks(session: SelectStack) -> tuple[AwaitingStackSelection, str]:
    """Show the generated options and wait for the user's pick."""
    awaiting = AwaitingStackSelection(
        idea=session.idea,
        expanded_idea=session.expanded_idea,
        tech_stacks=session.tech_stacks,
    )
    return awaiting, format_stack_options(session.tech_stacks)


async def start(session: Initial) -> tuple[AwaitingStackSelection, str]:
    """Expand the idea, generate the tech stack options and present them."""
    if not isinstance(session, Initial):
        raise SessionStateError(f"Cannot start a session in step '{session.step}'.")

    expanded = await expand_idea(session.idea)
    stacks = await generate_tech_stacks(session.idea)
    return present_stacks(
        SelectStack(idea=session.idea, expanded_idea=expanded, tech_stacks=tuple(stacks))
    )


async def start_guided_session(idea: str) -> tuple[AwaitingStackSelection, str]:
    """Create a session for an idea and run its first transition."""
    return await start(Initial(idea=validate_input(idea)))


async def _finish(
    idea: str,
    expanded_idea: str,
    stack: TechStackOption,
    questions: tuple[str, ...],
    answers: tuple[str, ...],
) -> tuple[Complete, str]:
    pairs = [QuestionAnswer(q, a) for q, a in zip(questions, answers)]
    final_plan = await generate_guided_plan(idea, expanded_idea, stack, pairs)
    complete = Complete(
        idea=idea,
        expanded_idea=expanded_idea,
        selected_stack=stack,
        questions=questions,
        answers=answers,
        final_plan=final_plan,
    )
    return complete, final_plan


async def select_stack(
    session: AwaitingStackSelection, selection: str
) -> tuple[GuidedSession, str]:
    """Apply the user's stack pick.

    Invalid input returns the same session with a re-prompt and makes no
    model call. A valid pick generates the open questions and asks the first.
    """
    if not isinstance(session, AwaitingStackSelection):
        raise SessionStateError(f"Cannot select a stack in step '{session.step}'.")

    index = parse_selection(selection, len(session.tech_stacks))
    if index is None:
        return session, reprompt_message(len(session.tech_stacks))

    stack = session.tech_stacks[index]
    print(f"[PMA] Selected tech stack: {stack.name}", file=sys.stderr)

    questions = tuple(await generate_open_questions(session.idea, session.expanded_idea, stack))
    if not questions:
        print("[PMA] No open questions generated, going straight to the plan", file=sys.stderr)
        return await _finish(session.idea, session.expanded_idea, stack, (), ())

    answering = AnswerQuestions(
        idea=session.idea,
        expanded_idea=session.expanded_idea,
        tech_stacks=session.tech_stacks,
        selected_stack=stack,
        questions=questions,
    )
    return answering, question_message(answering)


async def answer_question(
    session: AnswerQuestions, answer: str
) -> tuple[GuidedSession, str]:
    """Record the answer to the current question.

    Asks the next question, or generates the final plan after the last one.
    A blank answer re-asks the same question.
    """
    if not isinstance(session, AnswerQuestions):
        raise SessionStateError(f"Cannot answer a question in step '{session.step}'.")

    text = (answer or "").strip()
    if not text:
        return session, question_message(session)

    answers = session.answers + (text,)
    next_index = session.current_question_index + 1

    if next_index < len(session.questions):
        answering = AnswerQuestions(
            idea=session.idea,
            expanded_idea=session.expanded_idea,
            tech_stacks=session.tech_stacks,
            selected_stack=session.selected_stack,
            questions=session.questions,
            answers=answers,
            current_question_index=next_index,
        )
        return answering, question_message(answering)

    return await _finish(
        session.idea, session.expanded_idea, session.selected_stack, session.questions, answers
    )


async def advance(session: GuidedSession, user_input: str) -> tuple[GuidedSession, str]:
    """Run whichever transition the session's current step accepts."""
    if isinstance(session, Initial):
        return await start(session)
    if isinstance(session, SelectStack):
        return present_stacks(session)
    if isinstance(session, AwaitingStackSelection):
        return await select_stack(session, user_input)
    if isinstance(session, AnswerQuestions):
        return await answer_question(session, user_input)
    raise SessionStateError("Session is complete; start a new session to continue.")
