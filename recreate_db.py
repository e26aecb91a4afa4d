import logging

from sqlalchemy import text

from app.database import Base, engine
from app.models import (  # noqa: F401 - đăng ký các bảng vào Base.metadata
    parent_model, student_model, class_model, schedule_model,
    enrollment_model, makeup_model, notification_model,
)

logger = logging.getLogger(__name__)


def recreate_database():
    logger.info("Đang xóa tất cả các bảng cơ sở dữ liệu (sử dụng CASCADE)...")

    # Thứ tự ngược để bảng con bị xóa trước; CASCADE xử lý phần còn lại trên Postgres
    all_table_names = [table.name for table in reversed(Base.metadata.sorted_tables)]

    with engine.connect() as connection:
        for table_name in all_table_names:
            try:
                logger.info(f"Đang xóa bảng: {table_name}")
                connection.execute(text(f"DROP TABLE IF EXISTS {table_name} CASCADE;"))
                connection.commit()
            except Exception as e:
                # Trong phát triển, chúng ta muốn xóa sạch nhất có thể
                logger.error(f"Lỗi khi xóa bảng {table_name}: {e}")
                connection.rollback()

    logger.info("Đang tạo lại tất cả các bảng cơ sở dữ liệu...")
    Base.metadata.create_all(bind=engine)
    logger.info("Cơ sở dữ liệu đã được tạo lại thành công!")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    recreate_database()
