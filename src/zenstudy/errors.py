"""Error taxonomy shared by the study core."""


class StudyError(Exception):
    """Base class for errors surfaced to the user."""


class InsufficientContentError(StudyError):
    """No flashcards to build a quiz from."""


class GenerationFailure(StudyError):
    """The AI collaborator failed to produce a usable quiz."""


class AnalysisFailure(StudyError):
    """Post-quiz feedback could not be generated. Never fatal."""


class PersistenceFailure(StudyError):
    """Storage read or write failed."""


class QuizStateError(StudyError):
    """An operation was attempted in the wrong quiz session state."""
