import argparse
import logging
import sys

from pkfile_crypto import CryptoManager, KeyPaths, load_config

DEFAULT_CONFIG = 'config.ini'


def _build_parser():
    parser = argparse.ArgumentParser(description="RSA Encryption / DSA Signing Tool")

    action_group = parser.add_mutually_exclusive_group()
    action_group.add_argument('--genrsakey', action='store_true', help='Generate RSA key pair')
    action_group.add_argument('--gendsakey', action='store_true', help='Generate DSA key pair')
    action_group.add_argument('-e', '--encrypt', action='store_true', help='Encrypt file using RSA-OAEP')
    action_group.add_argument('-d', '--decrypt', action='store_true', help='Decrypt file using RSA-OAEP')
    action_group.add_argument('-s', '--sign', action='store_true', help='Sign file using DSA')
    action_group.add_argument('-v', '--verify', action='store_true', help='Verify DSA signature of file')

    parser.add_argument('file', nargs='?', help='File to encrypt, decrypt, sign or verify')
    parser.add_argument('-o', '--output', help='Output file (ciphertext, plaintext or signature)')

    sig_group = parser.add_mutually_exclusive_group()
    sig_group.add_argument('--sig', help='Signature file to verify against, Default:<file>.sig')
    sig_group.add_argument('--hex', help='Hex signature to verify against')

    parser.add_argument('-c', '--config', default=DEFAULT_CONFIG, help=f'INI config file, Default:{DEFAULT_CONFIG}')
    parser.add_argument('--keydir', help='Directory holding the key files (overrides config)')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')
    return parser


def main(argv=None):
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s - %(levelname)s - %(message)s')

    # Parameter validation
    if (args.encrypt or args.decrypt or args.sign or args.verify) and not args.file:
        parser.error("-e, -d, -s or -v requires a file.")
    if (args.encrypt or args.decrypt) and not args.output:
        parser.error("-e or -d requires -o to specify the output file.")

    config = load_config(args.config)
    manager = CryptoManager.from_config(config)
    if args.keydir:
        manager.key_paths = KeyPaths.in_directory(args.keydir)

    if args.genrsakey:
        ok = manager.generate_rsa_keys()
        print(f"RSA keys saved to '{manager.key_paths.rsa_private}' and '{manager.key_paths.rsa_public}'"
              if ok else "RSA key generation failed.")
    elif args.gendsakey:
        ok = manager.generate_dsa_keys()
        print(f"DSA keys saved to '{manager.key_paths.dsa_private}' and '{manager.key_paths.dsa_public}'"
              if ok else "DSA key generation failed.")
    elif args.encrypt:
        ok = manager.encrypt_rsa(args.file, args.output)
        print(f"File '{args.file}' successfully encrypted to '{args.output}'"
              if ok else "Encryption failed. Check that the RSA public key exists.")
    elif args.decrypt:
        ok = manager.decrypt_rsa(args.file, args.output)
        print(f"File '{args.file}' successfully decrypted to '{args.output}'"
              if ok else "Decryption failed. Incorrect key or corrupted file.")
    elif args.sign:
        ok, signature = manager.sign_dsa(args.file)
        if ok:
            sig_path = args.output or f"{args.file}.sig"
            print(signature)
            ok = manager.save_signature(signature, sig_path)
            print(f"Signature saved to '{sig_path}'" if ok else f"Could not save signature to '{sig_path}'")
        else:
            print("Signature generation failed. Check that the DSA private key exists.")
    elif args.verify:
        if args.hex is not None:
            ok, signature = True, args.hex.strip()
        else:
            ok, signature = manager.read_signature(args.sig or f"{args.file}.sig")
        if not ok:
            print("Could not read signature file.")
        else:
            ok = manager.verify_dsa(args.file, signature)
            print("The signature is valid." if ok else "The signature is NOT valid.")
    else:
        parser.print_help()
        return 0

    return 0 if ok else 1


if __name__ == '__main__':
    sys.exit(main())
