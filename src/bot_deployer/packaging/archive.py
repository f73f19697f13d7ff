"""
Bot archive packager.
Builds the in-memory ZIP file uploaded to AWS Lambda for a bot.
"""
import io
import logging
import zipfile

from bot_deployer.exceptions import PackagingError

logger = logging.getLogger(__name__)

USER_CODE_FILENAME = 'user.js'

# Must match the module part of LAMBDA_HANDLER
WRAPPER_FILENAME = 'index.js'

WRAPPER_CODE = """const { Hl7Message, MedplumClient } = require("@medplum/core");
const fetch = require("node-fetch");
const userCode = require("./user.js");

exports.handler = async (event, context) => {
  const { accessToken, input, contentType } = event;
  const medplum = new MedplumClient({ fetch });
  medplum.setAccessToken(accessToken);
  try {
    return await userCode.handler(medplum, {
      input:
        contentType === "x-application/hl7-v2+er7"
          ? Hl7Message.parse(input)
          : input,
      contentType,
    });
  } catch (err) {
    if (err instanceof Error) {
      console.log("Unhandled error: " + err.message + "\\n" + err.stack);
    } else {
      console.log("Unhandled error: " + err);
    }
    throw err;
  }
};
"""


def create_zip_file(code: str) -> bytes:
    """
    Package bot code together with the handler wrapper.

    Args:
        code: Source code of the bot

    Returns:
        Bytes of a ZIP archive holding the bot code and the wrapper

    Raises:
        PackagingError: If the archive could not be built
    """
    if not isinstance(code, str):
        raise PackagingError(f"Bot code must be a string, got {type(code).__name__}")

    buffer = io.BytesIO()
    try:
        with zipfile.ZipFile(buffer, 'w', zipfile.ZIP_DEFLATED) as zf:
            zf.writestr(USER_CODE_FILENAME, code.encode('utf-8'))
            zf.writestr(WRAPPER_FILENAME, WRAPPER_CODE.encode('utf-8'))
    except (zipfile.BadZipFile, OSError, UnicodeEncodeError, ValueError) as e:
        logger.error(f"Error building bot archive: {e}")
        raise PackagingError(f"Failed to build bot archive: {e}") from e

    return buffer.getvalue()
