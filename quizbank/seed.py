"""
Seed the database backend from the JSON data files.

Usage:
    python -m quizbank.seed -i    # clear tables, import QUESTIONS_FILE and QUIZ_RESULTS_FILE
    python -m quizbank.seed -d    # delete all questions and quiz results
"""
import argparse
import logging
import sys
from typing import List, Optional

from quizbank.core.config import Settings, get_settings
from quizbank.core.database import create_db_engine, make_session_factory, init_db, close_db
from quizbank.core.exceptions import QuizBankError
from quizbank.storage.database import SqlQuestionStore, SqlQuizResultStore
from quizbank.storage.json_file import JsonQuestionStore, JsonQuizResultStore

logger = logging.getLogger(__name__)

def import_data(settings: Settings, question_store: SqlQuestionStore, result_store: SqlQuizResultStore) -> dict:
    questions = JsonQuestionStore(settings.QUESTIONS_FILE).load()
    results = JsonQuizResultStore(settings.QUIZ_RESULTS_FILE).load()
    logger.info("Clearing existing data...")
    n_questions = question_store.replace_all(questions)
    n_results = result_store.replace_all(results)
    logger.info(f"Imported {n_questions} questions and {n_results} quiz results")
    return {"questions": n_questions, "quiz_results": n_results}

def delete_data(question_store: SqlQuestionStore, result_store: SqlQuizResultStore) -> None:
    question_store.replace_all([])
    result_store.delete_all()
    logger.info("Deleted all questions and quiz results")

def main(argv: Optional[List[str]] = None, settings: Optional[Settings] = None) -> int:
    parser = argparse.ArgumentParser(description="Import or delete QuizBank seed data")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("-i", "--import", dest="do_import", action="store_true", help="import the JSON data files")
    group.add_argument("-d", "--delete", dest="do_delete", action="store_true", help="delete all data")
    args = parser.parse_args(argv)

    if not (args.do_import or args.do_delete):
        print("Use -i to import data or -d to delete data.")
        return 0

    settings = settings or get_settings()
    logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
                        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    engine = create_db_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
    try:
        init_db(engine)
        session_factory = make_session_factory(engine)
        question_store = SqlQuestionStore(session_factory)
        result_store = SqlQuizResultStore(session_factory)
        if args.do_import:
            import_data(settings, question_store, result_store)
            print("Data imported successfully.")
        else:
            delete_data(question_store, result_store)
            print("Data deleted successfully.")
        return 0
    except QuizBankError as e:
        logger.error(f"Seeding failed: {e.message}")
        return 1
    except Exception as e:
        logger.error(f"Seeding failed: {e}", exc_info=True)
        return 1
    finally:
        close_db(engine)

if __name__ == "__main__":
    sys.exit(main())
