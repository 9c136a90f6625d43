"""
上传文件存储

共享文件系统目录，每次上传生成唯一存储名 (uuid4 hex + 原始扩展名)，并发上传不会互相覆盖。
"""

import uuid
from pathlib import Path
from typing import Tuple


class FileStorage:
    """本地磁盘存储"""

    def __init__(self, upload_dir: str):
        self.upload_dir = Path(upload_dir)

    def save(self, data: bytes, original_name: str) -> Tuple[str, str]:
        """
        写入文件

        Args:
            data: 文件字节
            original_name: 原始文件名（只取扩展名）

        Returns:
            (存储名, 存储路径)
        """
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        file_name = f"resume-{uuid.uuid4().hex}{Path(original_name).suffix.lower()}"
        file_path = self.upload_dir / file_name
        file_path.write_bytes(data)
        return file_name, str(file_path)

    def remove(self, file_path: str) -> None:
        """
        删除文件

        Raises:
            OSError: 文件不存在或无法删除
        """
        Path(file_path).unlink()
