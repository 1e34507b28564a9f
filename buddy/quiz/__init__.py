from buddy.quiz.quiz_service import QuizService

__all__ = ["QuizService"]
