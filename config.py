import os

# 기본 디렉토리 설정
BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# 경로 설정
STATIC_DIR = os.path.join(BASE_DIR, "static")
DATA_DIR = os.getenv("DATA_DIR", os.path.join(BASE_DIR, "data"))
LOG_FILE = os.path.join(BASE_DIR, "launch.log")

PAPER_PATH = os.getenv("PAPER_PATH", os.path.join(BASE_DIR, "paper.pdf"))
COORDINATES_PATH = os.getenv("COORDINATES_PATH", os.path.join(DATA_DIR, "question_locations.json"))
ANSWER_KEY_PATH = os.getenv("ANSWER_KEY_PATH", os.path.join(DATA_DIR, "answer_key.json"))
REPORT_OUTPUT_DIR = os.getenv("REPORT_OUTPUT_DIR", "")  # 비어 있으면 디스크 저장 안 함

# 서버 설정
DEFAULT_HOST = os.getenv("HOST", "127.0.0.1")
DEFAULT_PORT = int(os.getenv("PORT", "8000"))

# 시험 설정
TOTAL_QUESTIONS = 180
TEST_DURATION_SECONDS = int(os.getenv("TEST_DURATION_SECONDS", str(3 * 60 * 60)))
OPTION_LABELS = ("A", "B", "C", "D")
MARKS_CORRECT = 4
MARKS_WRONG = 1

# 좌표/줌 설정
TAGGER_SCALE = 1.5      # 좌표 태깅 도구에서 사용한 배율 (변경 금지)
VIEW_SCALE = float(os.getenv("VIEW_SCALE", "2.5"))   # 화면 렌더링 배율
SCROLL_PADDING = 30     # 스크롤 위치 여백 (px)

# 다운로드 파일명
REPORT_FILENAME = "Result_Report.pdf"
PAPER_DOWNLOAD_NAME = "NEET_Question_Paper.pdf"
